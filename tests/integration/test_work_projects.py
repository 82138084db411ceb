"""Integration tests for work projects and their payment totals."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.services.errors import NotFoundError, ValidationError
from duplex_tracker.services.ledger_service import LedgerWriter
from duplex_tracker.services.work_payment_service import WorkPaymentService
from duplex_tracker.services.work_project_service import WorkProjectService, project_display_name


def tiling(**overrides):
    payload = {
        "name": "Tiling",
        "totalPrice": "1000.00",
        "duration": 14,
        "startDate": "2024-02-01",
        "duplex_number": 4,
    }
    payload.update(overrides)
    return payload


def test_project_display_name():
    assert project_display_name("Tiling", 4) == "Tiling - duplex(4)"


@pytest.mark.asyncio
async def test_create_names_project_after_duplex(session: AsyncSession, principal):
    project = await WorkProjectService(session).create_work_project(tiling(), principal)

    assert project.name == "Tiling - duplex(4)"
    assert project.duration == 14
    assert float(project.total_price) == 1000.0
    assert project.created_by == "mona@example.com"


@pytest.mark.asyncio
async def test_create_requires_start_date(session: AsyncSession, principal):
    payload = tiling()
    del payload["startDate"]

    with pytest.raises(ValidationError) as exc:
        await WorkProjectService(session).create_work_project(payload, principal)

    assert "startDate" in exc.value.fields or "start_date" in exc.value.fields


@pytest.mark.asyncio
async def test_list_newest_first(session: AsyncSession, principal):
    service = WorkProjectService(session)
    first = await service.create_work_project(tiling(name="Framing"), principal)
    second = await service.create_work_project(tiling(name="Roofing", duplex_number=5), principal)

    projects = await service.list_work_projects()
    assert [p.id for p in projects] == [second.id, first.id]

    only_five = await service.list_work_projects(duplex_number=5)
    assert [p.id for p in only_five] == [second.id]


@pytest.mark.asyncio
async def test_project_payments_and_remaining(session: AsyncSession, principal):
    project = await WorkProjectService(session).create_work_project(tiling(), principal)
    payments = WorkPaymentService(session)
    for amount, day in (("600.00", "2024-02-10"), ("550.00", "2024-03-10")):
        await payments.create_work_payment(
            {"project_id": project.id, "amount": amount, "date": day, "duplex_number": 4},
            principal,
            [f"receipt-{day}.pdf"],
        )

    result = await WorkProjectService(session).get_project_payments(project.id)

    assert result.project.id == project.id
    assert result.total_paid == pytest.approx(1150.0)
    # Overpayment is allowed and shows up as a negative remainder
    assert result.remaining == pytest.approx(-150.0)
    assert [p.attachment_paths for p in result.payments] == [
        ["receipt-2024-03-10.pdf"],
        ["receipt-2024-02-10.pdf"],
    ]


@pytest.mark.asyncio
async def test_project_without_payments(session: AsyncSession, principal):
    project = await WorkProjectService(session).create_work_project(tiling(), principal)

    result = await WorkProjectService(session).get_project_payments(project.id)

    assert result.payments == []
    assert result.total_paid == 0
    assert result.remaining == pytest.approx(1000.0)


@pytest.mark.asyncio
async def test_missing_project(session: AsyncSession):
    with pytest.raises(NotFoundError):
        await WorkProjectService(session).get_project_payments(42)


@pytest.mark.asyncio
async def test_get_project_without_attachment_machinery(session: AsyncSession, principal):
    service = WorkProjectService(session)
    project = await service.create_work_project(tiling(), principal)

    assert (await service.get(project.id)).name == "Tiling - duplex(4)"
    assert not isinstance(service, LedgerWriter)
    with pytest.raises(NotFoundError) as exc:
        await service.get(project.id + 1)
    assert exc.value.message == "Work project not found"
