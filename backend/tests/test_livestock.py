"""Tests for livestock and its health / breeding / feeding records.

Record tests run against both storage layouts (embedded JSON arrays and
child tables).
"""

from datetime import date, timedelta

import pytest
import pytest_asyncio
from pydantic import ValidationError

from app.middleware.exceptions import ResourceNotFoundError
from app.repositories.livestock import LivestockRepository
from app.repositories.nested import NestedKind, make_nested_store

HEALTH = {
    "date": "2024-03-01",
    "diagnosis": "Foot rot",
    "treatment": "Zinc sulphate foot bath",
    "medication": "Oxytetracycline",
    "dosage": "10ml",
    "next_checkup_date": "2024-03-15",
    "cost": 2500.0,
    "vet_name": "Dr. Okonkwo",
}


@pytest.fixture(params=["embedded", "table"])
def livestock(request, store, cache):
    return LivestockRepository(store, cache, storage=request.param)


@pytest_asyncio.fixture
async def goat(livestock, ctx_a):
    return await livestock.create(
        ctx_a, {"name": "Nanny", "livestock_type": "goat", "breed": "Red Sokoto", "gender": "female"}
    )


@pytest.mark.integration
@pytest.mark.asyncio
class TestNestedRecords:
    async def test_add_then_read_then_remove(self, livestock, ctx_a, goat):
        before = await livestock.get_by_id(ctx_a, goat.id)

        record = await livestock.add_health_record(ctx_a, goat.id, HEALTH)
        after = await livestock.get_by_id(ctx_a, goat.id)

        assert len(after.health_records) == len(before.health_records) + 1
        stored = after.health_records[-1]
        assert stored.id == record.id
        assert stored.diagnosis == "Foot rot"
        assert stored.date == date(2024, 3, 1)
        assert stored.next_checkup_date == date(2024, 3, 15)
        assert stored.cost == 2500.0
        assert stored.vet_name == "Dr. Okonkwo"
        assert stored.created_at is not None
        assert stored.updated_at is not None

        assert await livestock.remove_health_record(ctx_a, goat.id, record.id) is True
        restored = await livestock.get_by_id(ctx_a, goat.id)
        assert len(restored.health_records) == len(before.health_records)

    async def test_pregnant_animal_with_breeding_record(self, livestock, ctx_a):
        cow = await livestock.create(
            ctx_a, {"name": "Daisy", "livestock_type": "cattle", "status": "pregnant"}
        )
        bred = date(2024, 1, 10)

        await livestock.add_breeding_record(
            ctx_a, cow.id,
            {
                "breeding_date": bred.isoformat(),
                "expected_birth_date": (bred + timedelta(days=280)).isoformat(),
                "status": "pregnant",
                "breeding_method": "natural",
            },
        )
        detail = await livestock.get_by_id(ctx_a, cow.id)

        assert detail.status == "pregnant"
        assert len(detail.breeding_records) == 1
        assert detail.breeding_records[0].expected_birth_date == bred + timedelta(days=280)

    async def test_get_record(self, livestock, ctx_a, goat):
        record = await livestock.add_feeding_record(
            ctx_a, goat.id, {"feed_type": "Hay", "quantity": 2.5, "unit": "kg", "feeding_time": "07:00"}
        )

        found = await livestock.get_record(ctx_a, goat.id, NestedKind.FEEDING, record.id)

        assert found.feed_type == "Hay"
        assert found.quantity == 2.5

    async def test_update_record_merges_fields(self, livestock, ctx_a, goat):
        record = await livestock.add_feeding_record(
            ctx_a, goat.id, {"feed_type": "Hay", "quantity": 2.5, "unit": "kg", "feeding_time": "07:00"}
        )

        updated = await livestock.update_feeding_record(ctx_a, goat.id, record.id, {"quantity": 3})

        assert updated.id == record.id
        assert updated.quantity == 3
        assert updated.feed_type == "Hay"
        records = await livestock.list_records(ctx_a, goat.id, "feeding_records")
        assert [r.quantity for r in records] == [3]

    async def test_missing_record_is_not_an_error(self, livestock, ctx_a, goat):
        assert await livestock.get_record(ctx_a, goat.id, NestedKind.HEALTH, "nope") is None
        assert await livestock.update_health_record(ctx_a, goat.id, "nope", {"cost": 1}) is None
        assert await livestock.remove_health_record(ctx_a, goat.id, "nope") is False

    async def test_missing_parent_raises_not_found(self, livestock, ctx_a):
        with pytest.raises(ResourceNotFoundError):
            await livestock.add_health_record(ctx_a, "no-such-animal", HEALTH)

    async def test_list_includes_records_in_both_layouts(self, livestock, ctx_a, goat):
        await livestock.add_health_record(ctx_a, goat.id, HEALTH)

        page = await livestock.list(ctx_a)

        assert len(page.items[0].health_records) == 1

    async def test_update_response_includes_records(self, livestock, ctx_a, goat):
        await livestock.add_health_record(ctx_a, goat.id, HEALTH)

        updated = await livestock.update(ctx_a, goat.id, {"weight": 31.5})

        assert updated.weight == 31.5
        assert [r.diagnosis for r in updated.health_records] == ["Foot rot"]

    async def test_record_changes_refresh_cached_detail(self, livestock, ctx_a, goat):
        assert (await livestock.cached_get(ctx_a, goat.id)).health_records == []

        await livestock.add_health_record(ctx_a, goat.id, HEALTH)

        assert len((await livestock.cached_get(ctx_a, goat.id)).health_records) == 1


@pytest.mark.unit
@pytest.mark.asyncio
class TestRecordValidation:
    async def test_expected_birth_must_follow_breeding(self, livestock, ctx_a, goat):
        with pytest.raises(ValidationError, match="Expected birth date must be after breeding date"):
            await livestock.add_breeding_record(
                ctx_a, goat.id,
                {"breeding_date": "2024-05-01", "expected_birth_date": "2024-04-01"},
            )

    async def test_feeding_quantity_must_be_positive(self, livestock, ctx_a, goat):
        with pytest.raises(ValidationError):
            await livestock.add_feeding_record(
                ctx_a, goat.id, {"feed_type": "Hay", "quantity": 0, "unit": "kg", "feeding_time": "07:00"}
            )

    async def test_health_record_requires_diagnosis(self, livestock, ctx_a, goat):
        with pytest.raises(ValidationError):
            await livestock.add_health_record(ctx_a, goat.id, {**HEALTH, "diagnosis": "  "})

    async def test_clearing_required_field_is_rejected_before_write(self, livestock, ctx_a, goat):
        record = await livestock.add_health_record(ctx_a, goat.id, HEALTH)

        with pytest.raises(ValidationError):
            await livestock.update_health_record(ctx_a, goat.id, record.id, {"diagnosis": None})

        detail = await livestock.get_by_id(ctx_a, goat.id)
        assert detail.health_records[0].diagnosis == "Foot rot"

    async def test_partial_update_checked_against_stored_dates(self, livestock, ctx_a, goat):
        record = await livestock.add_breeding_record(
            ctx_a, goat.id, {"breeding_date": "2024-05-01", "expected_birth_date": "2024-10-01"}
        )

        with pytest.raises(ValidationError, match="Expected birth date must be after breeding date"):
            await livestock.update_breeding_record(
                ctx_a, goat.id, record.id, {"expected_birth_date": "2024-04-01"}
            )

        stored = await livestock.get_record(ctx_a, goat.id, NestedKind.BREEDING, record.id)
        assert stored.expected_birth_date == date(2024, 10, 1)

    async def test_livestock_requires_name_and_type(self, livestock, ctx_a):
        with pytest.raises(ValidationError):
            await livestock.create(ctx_a, {"livestock_type": "goat"})
        with pytest.raises(ValidationError):
            await livestock.create(ctx_a, {"name": "Nanny", "livestock_type": "goat", "quantity": 0})

    async def test_unknown_storage_mode(self, store):
        with pytest.raises(ValueError):
            make_nested_store("graph", store)


@pytest.mark.integration
@pytest.mark.asyncio
class TestLivestockStats:
    async def test_groups_weighted_by_quantity(self, livestock, ctx_a):
        await livestock.create(ctx_a, {"name": "Herd A", "livestock_type": "goat", "quantity": 3})
        await livestock.create(
            ctx_a,
            {"name": "Herd B", "livestock_type": "cattle", "quantity": 2, "breeding_status": "pregnant"},
        )

        stats = await livestock.aggregate_stats(ctx_a)

        assert stats.total_records == 2
        assert stats.totals["total_livestock"] == 5
        assert stats.groups["livestock_type"] == {"goat": 3, "cattle": 2}
        assert stats.groups["status"] == {"active": 5}
        assert stats.groups["breeding_status"] == {"not_breeding": 3, "pregnant": 2}

    async def test_filters(self, livestock, ctx_a):
        await livestock.create(ctx_a, {"name": "Nanny", "livestock_type": "goat", "breed": "Red Sokoto"})
        await livestock.create(ctx_a, {"name": "Bull", "livestock_type": "cattle", "breed": "White Fulani"})

        by_breed = await livestock.list(ctx_a, {"breed": "sokoto"})
        by_type = await livestock.list(ctx_a, {"livestock_type": "cattle"})

        assert [a.name for a in by_breed.items] == ["Nanny"]
        assert [a.name for a in by_type.items] == ["Bull"]
