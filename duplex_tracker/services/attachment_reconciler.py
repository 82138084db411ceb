"""Set algebra for converging a record's attachments onto a desired set."""

from collections.abc import Iterable
from typing import NamedTuple


class AttachmentDelta(NamedTuple):
    """Inserts and deletes needed to turn the current set into the desired one."""

    to_delete: frozenset[str]
    to_insert: frozenset[str]

    @property
    def is_empty(self) -> bool:
        return not self.to_delete and not self.to_insert


def reconcile_attachments(existing: Iterable[str], desired: Iterable[str]) -> AttachmentDelta:
    """Compute the minimal delta between two attachment path collections.

    Attachments are a set: order and repeated entries in either input are
    irrelevant. Paths present in both are left alone, so submitting the
    current set again yields an empty delta, and an empty desired set
    detaches everything.

    Args:
        existing: Paths currently stored for the record
        desired: Paths the record should end up with

    Returns:
        AttachmentDelta with to_delete = existing - desired and
        to_insert = desired - existing
    """
    existing_paths = frozenset(existing)
    desired_paths = frozenset(desired)
    return AttachmentDelta(
        to_delete=existing_paths - desired_paths,
        to_insert=desired_paths - existing_paths,
    )


__all__ = ["AttachmentDelta", "reconcile_attachments"]
