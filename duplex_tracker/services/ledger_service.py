"""Transactional writes of financial records together with their attachments.

A record and its attachment rows are always written in one transaction:

1. scalar row insert or full overwrite
2. attachment delta computed by the reconciler
3. deletes scoped by (owner id, path), then a bulk insert
4. commit, or rollback of everything on any failure

The joined record (scalar fields + attachment paths) is re-read after
commit and returned to the caller.
"""

import logging
from collections.abc import Iterable
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from duplex_tracker.services.attachment_reconciler import AttachmentDelta, reconcile_attachments
from duplex_tracker.services.audit_service import AuditService
from duplex_tracker.services.duplicate_guard import DuplicateGuard
from duplex_tracker.services.errors import (
    DependencyError,
    LedgerError,
    NotFoundError,
    TransactionError,
    store_errors,
)

logger = logging.getLogger(__name__)


class SessionService:
    """Base for services owning an async session and one record model.

    Provides lookup by id, the commit-or-rollback transaction scope and
    audited deletes. A rejected or failed write rolls the session back,
    which expires every instance loaded through it: records returned by
    earlier calls must be re-read with ``get`` afterwards.
    """

    record_model: Any = None
    entity_type: str = ""
    entity_label: str = "Record"

    def __init__(self, session: AsyncSession):
        """Initialize with async database session."""
        self.session = session

    # Loading

    def _load_options(self) -> list:
        return []

    async def _fetch(self, record_id: int):
        stmt = (
            select(self.record_model)
            .options(*self._load_options())
            .where(self.record_model.id == record_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self, record_id: int):
        """Return the record with its eager-loaded relationships.

        Raises:
            NotFoundError: if no record has this id
        """
        with store_errors():
            record = await self._fetch(record_id)
        if record is None:
            raise NotFoundError(f"{self.entity_label} not found")
        return record

    async def _exists(self, record_id: int) -> bool:
        result = await self.session.execute(
            select(self.record_model.id).where(self.record_model.id == record_id)
        )
        return result.scalar_one_or_none() is not None

    # Transactions

    async def _rollback(self, action: str, error: Exception) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as rollback_error:
            logger.error("%s %s failed: %s", action, self.entity_type, error, exc_info=error)
            logger.error("Rollback failed: %s", rollback_error)
            return
        if isinstance(error, LedgerError):
            logger.info("%s %s rejected: %s", action, self.entity_type, error.message)
        else:
            logger.error(
                "%s %s failed; changes rolled back: %s",
                action,
                self.entity_type,
                error,
                exc_info=error,
            )

    @asynccontextmanager
    async def _transaction(self, action: str) -> AsyncIterator[None]:
        """Commit the enclosed writes, or roll all of them back.

        Store failures surface as DependencyError (unreachable database) or
        TransactionError; ledger errors raised in the block propagate as-is.
        """
        try:
            yield
            await self.session.commit()
        except OperationalError as e:
            await self._rollback(action, e)
            raise DependencyError("Database unavailable") from e
        except SQLAlchemyError as e:
            await self._rollback(action, e)
            raise TransactionError(f"Failed to {action} {self.entity_type}") from e
        except Exception as e:
            await self._rollback(action, e)
            raise

    async def _delete_record(self, record_id: int, actor_id: int | None = None) -> None:
        """Delete the record row; attachment rows go with it via ON DELETE CASCADE."""
        async with self._transaction("delete"):
            if not await self._exists(record_id):
                raise NotFoundError(f"{self.entity_label} not found")
            await self.session.execute(
                delete(self.record_model).where(self.record_model.id == record_id)
            )
            AuditService.log(
                self.session,
                entity_type=self.entity_type,
                entity_id=record_id,
                action="delete",
                actor_id=actor_id,
            )
        logger.info("Deleted %s %d", self.entity_type, record_id)


class LedgerWriter(SessionService):
    """Shared create/update/delete machinery for records that own attachments.

    Subclasses set the record model, its attachment model and the name of
    the attachment column referencing the record.
    """

    attachment_model: Any = None
    owner_key: str = ""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.guard = DuplicateGuard(session)

    def _load_options(self) -> list:
        return [selectinload(self.record_model.attachments)]

    @staticmethod
    def _overwrite(record, values: dict[str, Any]) -> list[str]:
        """Assign ``values`` to ``record`` and return the names of fields that changed."""
        changed = [name for name, value in values.items() if getattr(record, name) != value]
        for name, value in values.items():
            setattr(record, name, value)
        return changed

    # Attachments

    @property
    def _owner_column(self):
        return getattr(self.attachment_model, self.owner_key)

    async def _existing_paths(self, record_id: int) -> set[str]:
        result = await self.session.execute(
            select(self.attachment_model.attachment_path).where(self._owner_column == record_id)
        )
        return set(result.scalars().all())

    async def _insert_attachments(self, record_id: int, paths: Iterable[str]) -> int:
        rows = [
            {self.owner_key: record_id, "attachment_path": path} for path in sorted(paths)
        ]
        if not rows:
            return 0
        await self.session.execute(insert(self.attachment_model), rows)
        return len(rows)

    async def _delete_attachments(self, record_id: int, paths: Iterable[str]) -> int:
        paths = sorted(paths)
        if not paths:
            return 0
        await self.session.execute(
            delete(self.attachment_model).where(
                self._owner_column == record_id,
                self.attachment_model.attachment_path.in_(paths),
            )
        )
        return len(paths)

    async def _reconcile(self, record_id: int, desired: Iterable[str]) -> AttachmentDelta:
        existing = await self._existing_paths(record_id)
        delta = reconcile_attachments(existing, desired)
        if delta.is_empty:
            return delta
        await self._delete_attachments(record_id, delta.to_delete)
        await self._insert_attachments(record_id, delta.to_insert)
        return delta


__all__ = ["LedgerWriter", "SessionService"]
