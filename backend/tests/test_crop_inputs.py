"""Tests for input applications and crop growth records."""

import pytest
import pytest_asyncio
from pydantic import ValidationError

from app.middleware.exceptions import PermissionDeniedError, ResourceNotFoundError
from app.repositories.applications import ApplicationRepository
from app.repositories.crops import CropRepository
from app.repositories.growth_records import GrowthRecordRepository
from app.tenancy import OrganizationContext, OrgRole

UREA = {
    "product_name": "Urea 46%",
    "product_type": "fertilizer",
    "application_date": "2024-06-01",
    "application_method": "broadcast",
    "quantity": 50,
    "unit": "kg",
    "cost": 18000.0,
}


@pytest.fixture
def applications(store, cache):
    return ApplicationRepository(store, cache)


@pytest.fixture
def growth(store, cache):
    return GrowthRecordRepository(store, cache)


@pytest_asyncio.fixture
async def maize(store, ctx_a):
    return await CropRepository(store).create(ctx_a, {"crop_name": "Maize"})


@pytest.mark.integration
@pytest.mark.asyncio
class TestApplications:
    async def test_create_then_get(self, applications, ctx_a, maize):
        created = await applications.create(ctx_a, {**UREA, "crop_id": maize.id})

        fetched = await applications.get_by_id(ctx_a, created.id)

        assert fetched == created
        assert fetched.crop_id == maize.id
        assert fetched.quantity == 50
        assert fetched.organization_id == ctx_a.organization_id

    async def test_filters_and_search(self, applications, ctx_a):
        await applications.create(ctx_a, UREA)
        await applications.create(
            ctx_a,
            {
                **UREA,
                "product_name": "Lambda-cyhalothrin",
                "product_type": "insecticide",
                "target_pest_disease": "Fall armyworm",
            },
        )

        insecticides = await applications.list(ctx_a, {"product_type": "insecticide"})
        armyworm = await applications.list(ctx_a, {"search": "armyworm"})

        assert [a.product_name for a in insecticides.items] == ["Lambda-cyhalothrin"]
        assert armyworm.total == 1

    async def test_stats(self, applications, ctx_a):
        await applications.create(ctx_a, UREA)
        await applications.create(ctx_a, {**UREA, "cost": 2000.0, "application_method": None})

        stats = await applications.aggregate_stats(ctx_a)

        assert stats.total_records == 2
        assert stats.groups["product_type"] == {"fertilizer": 2}
        assert stats.groups["application_method"] == {"broadcast": 1, "unspecified": 1}
        assert stats.totals["cost"] == 20000.0

    async def test_isolated_between_organizations(self, applications, ctx_a, ctx_b):
        created = await applications.create(ctx_a, UREA)

        assert await applications.get_by_id(ctx_b, created.id) is None
        assert (await applications.list(ctx_b)).total == 0

    async def test_farmer_role_is_read_only(self, applications, org_a):
        farmer = OrganizationContext(organization_id=org_a.id, role=OrgRole.FARMER)

        with pytest.raises(PermissionDeniedError):
            await applications.create(farmer, UREA)


@pytest.mark.unit
@pytest.mark.asyncio
class TestApplicationValidation:
    async def test_unknown_product_type(self, applications, ctx_a):
        with pytest.raises(ValidationError):
            await applications.create(ctx_a, {**UREA, "product_type": "compost tea"})

    async def test_quantity_must_be_positive(self, applications, ctx_a):
        with pytest.raises(ValidationError, match="Quantity must be greater than 0"):
            await applications.create(ctx_a, {**UREA, "quantity": 0})

    async def test_next_application_follows_first(self, applications, ctx_a):
        with pytest.raises(ValidationError, match="Next application date must be after application date"):
            await applications.create(ctx_a, {**UREA, "next_application_date": "2024-05-01"})


@pytest.mark.integration
@pytest.mark.asyncio
class TestGrowthRecords:
    async def test_create_records_author_and_crop(self, growth, ctx_a, maize):
        record = await growth.create(
            ctx_a,
            {"crop_id": maize.id, "stage_name": "Germination", "start_date": "2024-06-01", "health_score": 80},
        )

        assert record.crop_id == maize.id
        assert record.created_by == "user-a"
        assert record.images == []

    async def test_crop_timeline(self, growth, ctx_a, maize):
        other = await CropRepository(growth.store).create(ctx_a, {"crop_name": "Rice"})
        await growth.create(ctx_a, {"crop_id": maize.id, "stage_name": "Germination", "start_date": "2024-06-01"})
        await growth.create(ctx_a, {"crop_id": maize.id, "stage_name": "Seedling", "start_date": "2024-06-08"})
        await growth.create(ctx_a, {"crop_id": other.id, "stage_name": "Tillering", "start_date": "2024-06-08"})

        timeline = await growth.list(ctx_a, {"crop_id": maize.id})

        assert timeline.total == 2
        assert {r.stage_name for r in timeline.items} == {"Germination", "Seedling"}

    async def test_crop_must_belong_to_organization(self, growth, ctx_b, maize):
        with pytest.raises(ResourceNotFoundError):
            await growth.create(
                ctx_b, {"crop_id": maize.id, "stage_name": "Germination", "start_date": "2024-06-01"}
            )
        assert (await growth.list(ctx_b)).total == 0

    async def test_update_keeps_crop(self, growth, ctx_a, maize):
        record = await growth.create(
            ctx_a, {"crop_id": maize.id, "stage_name": "Flowering", "start_date": "2024-07-01"}
        )

        updated = await growth.update(ctx_a, record.id, {"end_date": "2024-07-10", "crop_id": "elsewhere"})

        assert str(updated.end_date) == "2024-07-10"
        assert updated.crop_id == maize.id

    async def test_average_health_score(self, growth, ctx_a, maize):
        for score in (60, 90, None):
            await growth.create(
                ctx_a,
                {"crop_id": maize.id, "stage_name": "Seedling", "start_date": "2024-06-08", "health_score": score},
            )

        stats = await growth.aggregate_stats(ctx_a)

        assert stats.total_records == 3
        assert stats.groups["stage_name"] == {"Seedling": 3}
        assert stats.totals["average_health_score"] == 75.0


@pytest.mark.unit
@pytest.mark.asyncio
class TestGrowthRecordValidation:
    async def test_health_score_bounds(self, growth, ctx_a, maize):
        with pytest.raises(ValidationError):
            await growth.create(
                ctx_a,
                {"crop_id": maize.id, "stage_name": "Seedling", "start_date": "2024-06-08", "health_score": 120},
            )

    async def test_end_date_not_before_start(self, growth, ctx_a, maize):
        with pytest.raises(ValidationError, match="End date must be on or after start date"):
            await growth.create(
                ctx_a,
                {
                    "crop_id": maize.id,
                    "stage_name": "Seedling",
                    "start_date": "2024-06-08",
                    "end_date": "2024-06-01",
                },
            )

    async def test_image_urls_are_checked(self, growth, ctx_a, maize):
        with pytest.raises(ValidationError, match="Invalid URL format"):
            await growth.create(
                ctx_a,
                {
                    "crop_id": maize.id,
                    "stage_name": "Seedling",
                    "start_date": "2024-06-08",
                    "images": ["not a url"],
                },
            )
