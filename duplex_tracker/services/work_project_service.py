"""Work projects: labor budget envelopes that work payments are booked against."""

import logging
from decimal import Decimal
from typing import Any, NamedTuple

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from duplex_tracker.models.work_payment import WorkPayment
from duplex_tracker.models.work_project import WorkProject
from duplex_tracker.schemas.ledger import WorkProjectPayload, validate_payload
from duplex_tracker.services.audit_service import AuditService
from duplex_tracker.services.auth_service import Principal
from duplex_tracker.services.errors import store_errors
from duplex_tracker.services.ledger_service import SessionService

logger = logging.getLogger(__name__)


class ProjectPayments(NamedTuple):
    """A project with its payments and how much of the budget is left."""

    project: WorkProject
    payments: list[WorkPayment]
    total_paid: float
    remaining: float  # negative once the project is overpaid


def project_display_name(name: str, duplex_number: int) -> str:
    """Stored project name: ``"<name> - duplex(<n>)"``."""
    return f"{name} - duplex({duplex_number})"


class WorkProjectService(SessionService):
    """Create, read and list work projects."""

    record_model = WorkProject
    entity_type = "work_project"
    entity_label = "Work project"

    async def create_work_project(
        self,
        payload: WorkProjectPayload | dict[str, Any],
        principal: Principal | None = None,
    ) -> WorkProject:
        """Create a work project named after its duplex.

        Args:
            payload: Project fields; ``name`` is suffixed with the duplex number
            principal: Recording user; their email is the fallback creator

        Returns:
            The stored project

        Raises:
            ValidationError: payload is malformed
            TransactionError: the insert failed and was rolled back
        """
        data = validate_payload(WorkProjectPayload, payload)
        created_by = data.created_by or (principal.email if principal else None)

        async with self._transaction("create"):
            project = WorkProject(
                name=project_display_name(data.name, data.duplex_number),
                total_price=data.total_price,
                duration=data.duration,
                start_date=data.start_date,
                notes=data.notes or None,
                duplex_number=data.duplex_number,
                created_by=created_by,
            )
            self.session.add(project)
            await self.session.flush()
            project_id = project.id
            AuditService.log(
                self.session,
                entity_type=self.entity_type,
                entity_id=project_id,
                action="create",
                actor_id=principal.id if principal else None,
            )

        logger.info("Created work project %d: %s", project_id, project.name)
        return await self.get(project_id)

    async def list_work_projects(self, duplex_number: int | None = None) -> list[WorkProject]:
        """List work projects, newest first."""
        stmt = select(WorkProject)
        if duplex_number:
            stmt = stmt.where(WorkProject.duplex_number == duplex_number)
        stmt = stmt.order_by(WorkProject.created_at.desc(), WorkProject.id.desc())
        with store_errors():
            result = await self.session.execute(stmt)
            return list(result.scalars().all())

    async def get_project_payments(self, project_id: int) -> ProjectPayments:
        """Return a project with its payments (newest payment date first).

        Raises:
            NotFoundError: no project with this id
        """
        project = await self.get(project_id)

        with store_errors():
            payments_result = await self.session.execute(
                select(WorkPayment)
                .options(selectinload(WorkPayment.attachments), selectinload(WorkPayment.project))
                .where(WorkPayment.project_id == project_id)
                .order_by(WorkPayment.date.desc(), WorkPayment.id.desc())
            )
            payments = list(payments_result.scalars().all())

            total_result = await self.session.execute(
                select(func.coalesce(func.sum(WorkPayment.amount), 0)).where(
                    WorkPayment.project_id == project_id
                )
            )
            total_paid = Decimal(str(total_result.scalar() or 0))

        remaining = Decimal(str(project.total_price)) - total_paid
        return ProjectPayments(
            project=project,
            payments=payments,
            total_paid=float(total_paid),
            remaining=float(remaining),
        )


__all__ = ["ProjectPayments", "WorkProjectService", "project_display_name"]
