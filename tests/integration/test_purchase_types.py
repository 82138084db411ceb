"""Integration tests for custom purchase types."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.services.errors import (
    DuplicateRecordError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from duplex_tracker.services.purchase_service import PurchaseService
from duplex_tracker.services.purchase_type_service import PurchaseTypeService


@pytest.mark.asyncio
async def test_admin_creates_and_lists_types(session: AsyncSession, admin_principal):
    service = PurchaseTypeService(session)

    plumbing = await service.create_purchase_type({"name": "Plumbing", "name_ar": "سباكة"}, admin_principal)
    await service.create_purchase_type({"name": "Electrical", "name_ar": "كهرباء"}, admin_principal)

    assert plumbing.type_key == f"custom-{plumbing.id}"
    assert plumbing.created_by == "admin@example.com"
    names = [t.name for t in await service.list_purchase_types()]
    assert sorted(names) == ["Electrical", "Plumbing"]


@pytest.mark.asyncio
async def test_non_admin_cannot_create(session: AsyncSession, principal):
    with pytest.raises(PermissionDeniedError):
        await PurchaseTypeService(session).create_purchase_type(
            {"name": "Plumbing", "name_ar": "سباكة"}, principal
        )


@pytest.mark.asyncio
async def test_both_names_required(session: AsyncSession, admin_principal):
    with pytest.raises(ValidationError) as exc:
        await PurchaseTypeService(session).create_purchase_type({"name": "Plumbing"}, admin_principal)

    assert "name_ar" in exc.value.fields


@pytest.mark.asyncio
async def test_either_name_taken_is_duplicate(session: AsyncSession, admin_principal):
    service = PurchaseTypeService(session)
    await service.create_purchase_type({"name": "Plumbing", "name_ar": "سباكة"}, admin_principal)

    with pytest.raises(DuplicateRecordError):
        await service.create_purchase_type({"name": "Pipes", "name_ar": "سباكة"}, admin_principal)
    with pytest.raises(DuplicateRecordError):
        await service.create_purchase_type({"name": "Plumbing", "name_ar": "أنابيب"}, admin_principal)


@pytest.mark.asyncio
async def test_type_in_use_cannot_be_deleted(session: AsyncSession, admin_principal, principal):
    service = PurchaseTypeService(session)
    plumbing = await service.create_purchase_type({"name": "Plumbing", "name_ar": "سباكة"}, admin_principal)
    await PurchaseService(session).create_purchase(
        {
            "name": "PVC pipes",
            "duplex_number": 1,
            "type": plumbing.type_key,
            "purchase_date": "2024-03-01",
            "price": "75.00",
        },
        principal,
    )

    with pytest.raises(ValidationError):
        await service.delete_purchase_type(plumbing.id, admin_principal)

    assert len(await service.list_purchase_types()) == 1


@pytest.mark.asyncio
async def test_delete_unused_type(session: AsyncSession, admin_principal):
    service = PurchaseTypeService(session)
    plumbing = await service.create_purchase_type({"name": "Plumbing", "name_ar": "سباكة"}, admin_principal)

    await service.delete_purchase_type(plumbing.id, admin_principal)

    assert await service.list_purchase_types() == []
    with pytest.raises(NotFoundError):
        await service.delete_purchase_type(plumbing.id, admin_principal)


@pytest.mark.asyncio
async def test_non_admin_cannot_delete(session: AsyncSession, admin_principal, principal):
    service = PurchaseTypeService(session)
    plumbing = await service.create_purchase_type({"name": "Plumbing", "name_ar": "سباكة"}, admin_principal)

    with pytest.raises(PermissionDeniedError):
        await service.delete_purchase_type(plumbing.id, principal)
