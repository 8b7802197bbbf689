"""HTTP API tests: routing, permissions and the error response format."""

from datetime import date, timedelta

import httpx
import pytest
import respx

from conftest import MAPBOX_URL, STORAGE_URL

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
FARMER = {"first_name": "Bola", "last_name": "Adeyemi", "state": "Oyo"}


def _error(response) -> dict:
    return response.json()["error"]


@pytest.mark.integration
@pytest.mark.asyncio
class TestHealthEndpoints:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    async def test_readiness(self, client):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"] == "ok"
        assert body["checks"]["realtime"] == "local"


@pytest.mark.integration
@pytest.mark.asyncio
class TestAuthentication:
    async def test_missing_token(self, client):
        response = await client.get("/api/farmers/")

        assert response.status_code == 401
        assert _error(response)["code"] == "HTTP_401"

    async def test_invalid_token(self, client):
        response = await client.get("/api/farmers/", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401


@pytest.mark.integration
@pytest.mark.asyncio
class TestFarmerEndpoints:
    async def test_crud_round_trip(self, client, admin_headers):
        created = await client.post("/api/farmers/", json=FARMER, headers=admin_headers)
        assert created.status_code == 201
        farmer = created.json()
        assert farmer["farmer_code"].startswith("FRM-")

        fetched = await client.get(f"/api/farmers/{farmer['id']}", headers=admin_headers)
        assert fetched.json()["last_name"] == "Adeyemi"

        patched = await client.patch(
            f"/api/farmers/{farmer['id']}", json={"phone": "08012345678"}, headers=admin_headers
        )
        assert patched.json()["phone"] == "08012345678"
        assert patched.json()["state"] == "Oyo"

        deleted = await client.delete(f"/api/farmers/{farmer['id']}", headers=admin_headers)
        assert deleted.status_code == 204

        missing = await client.get(f"/api/farmers/{farmer['id']}", headers=admin_headers)
        assert missing.status_code == 404
        assert _error(missing)["code"] == "RESOURCE_NOT_FOUND"

    async def test_list_reflects_new_rows(self, client, admin_headers):
        empty = await client.get("/api/farmers/", headers=admin_headers)
        assert empty.json()["total"] == 0

        await client.post("/api/farmers/", json=FARMER, headers=admin_headers)
        page = await client.get("/api/farmers/", params={"search": "adeyemi"}, headers=admin_headers)

        body = page.json()
        assert body["total"] == 1
        assert body["page"] == 1
        assert body["page_size"] == 10
        assert body["has_more"] is False

    async def test_stats(self, client, admin_headers):
        await client.post("/api/farmers/", json={**FARMER, "farm_size": 2.5}, headers=admin_headers)

        response = await client.get("/api/farmers/stats", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["total_records"] == 1
        assert response.json()["totals"]["farm_size"] == 2.5

    async def test_farmer_role_cannot_create(self, client, farmer_headers):
        response = await client.post("/api/farmers/", json=FARMER, headers=farmer_headers)

        assert response.status_code == 403
        assert "farmers.write" in _error(response)["message"]

    async def test_extension_officer_cannot_delete(self, client, admin_headers, officer_headers):
        farmer = (await client.post("/api/farmers/", json=FARMER, headers=officer_headers)).json()

        response = await client.delete(f"/api/farmers/{farmer['id']}", headers=officer_headers)

        assert response.status_code == 403

    async def test_other_organization_gets_not_found(self, client, admin_headers, other_org_headers):
        farmer = (await client.post("/api/farmers/", json=FARMER, headers=admin_headers)).json()

        response = await client.get(f"/api/farmers/{farmer['id']}", headers=other_org_headers)
        listing = await client.get("/api/farmers/", headers=other_org_headers)

        assert response.status_code == 404
        assert listing.json()["total"] == 0

    async def test_validation_error_format(self, client, admin_headers):
        response = await client.post(
            "/api/farmers/", json={"first_name": "  ", "last_name": "Obi"}, headers=admin_headers
        )

        assert response.status_code == 422
        error = _error(response)
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Value is required"
        assert error["details"]["errors"]

    async def test_invalid_date_range(self, client, admin_headers):
        today = date.today()
        response = await client.get(
            "/api/farmers/",
            params={"start_date": today.isoformat(), "end_date": (today - timedelta(days=1)).isoformat()},
            headers=admin_headers,
        )

        assert response.status_code == 422

    async def test_page_size_is_capped(self, client, admin_headers):
        response = await client.get("/api/farmers/", params={"page_size": 1000}, headers=admin_headers)

        assert response.status_code == 422


@pytest.mark.integration
@pytest.mark.asyncio
class TestLivestockEndpoints:
    async def _cow(self, client, headers) -> dict:
        response = await client.post(
            "/api/livestock/",
            json={"name": "Daisy", "livestock_type": "cattle", "status": "pregnant"},
            headers=headers,
        )
        assert response.status_code == 201
        return response.json()

    async def test_breeding_record_lifecycle(self, client, admin_headers):
        cow = await self._cow(client, admin_headers)
        base = f"/api/livestock/{cow['id']}/breeding_records"

        added = await client.post(
            base,
            json={"breeding_date": "2024-01-10", "expected_birth_date": "2024-10-16", "status": "pregnant"},
            headers=admin_headers,
        )
        assert added.status_code == 201
        record = added.json()

        detail = (await client.get(f"/api/livestock/{cow['id']}", headers=admin_headers)).json()
        assert detail["status"] == "pregnant"
        assert [r["id"] for r in detail["breeding_records"]] == [record["id"]]

        patched = await client.patch(
            f"{base}/{record['id']}", json={"number_of_offspring": 1}, headers=admin_headers
        )
        assert patched.json()["number_of_offspring"] == 1

        fetched = await client.get(f"{base}/{record['id']}", headers=admin_headers)
        assert fetched.json()["expected_birth_date"] == "2024-10-16"

        assert (await client.delete(f"{base}/{record['id']}", headers=admin_headers)).status_code == 204
        assert (await client.delete(f"{base}/{record['id']}", headers=admin_headers)).status_code == 404

    async def test_invalid_record_body(self, client, admin_headers):
        cow = await self._cow(client, admin_headers)

        response = await client.post(
            f"/api/livestock/{cow['id']}/breeding_records",
            json={"breeding_date": "2024-05-01", "expected_birth_date": "2024-04-01"},
            headers=admin_headers,
        )

        assert response.status_code == 422
        assert _error(response)["message"] == "Expected birth date must be after breeding date"

    async def test_unknown_record_kind(self, client, admin_headers):
        cow = await self._cow(client, admin_headers)

        response = await client.get(f"/api/livestock/{cow['id']}/vaccination_records", headers=admin_headers)

        assert response.status_code == 422

    async def test_record_on_missing_animal(self, client, admin_headers):
        response = await client.post(
            "/api/livestock/missing/feeding_records",
            json={"feed_type": "Hay", "quantity": 2, "unit": "kg", "feeding_time": "07:00"},
            headers=admin_headers,
        )

        assert response.status_code == 404

    async def test_farmer_role_cannot_add_records(self, client, admin_headers, farmer_headers):
        cow = await self._cow(client, admin_headers)

        response = await client.post(
            f"/api/livestock/{cow['id']}/feeding_records",
            json={"feed_type": "Hay", "quantity": 2, "unit": "kg", "feeding_time": "07:00"},
            headers=farmer_headers,
        )

        assert response.status_code == 403

    async def test_stats(self, client, admin_headers):
        await client.post(
            "/api/livestock/", json={"name": "Flock", "livestock_type": "poultry", "quantity": 40},
            headers=admin_headers,
        )

        stats = (await client.get("/api/livestock/stats", headers=admin_headers)).json()

        assert stats["totals"]["total_livestock"] == 40
        assert stats["groups"]["livestock_type"] == {"poultry": 40}


@pytest.mark.integration
@pytest.mark.asyncio
class TestOrganizationEndpoints:
    async def test_get_my_organization(self, client, admin_headers, org_a):
        response = await client.get("/api/organizations/me", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["name"] == org_a.name
        assert response.json()["subscription_plan"] == "basic"

    async def test_admin_sets_farm_location(self, client, admin_headers):
        unset = await client.get("/api/organizations/me/location", headers=admin_headers)
        assert unset.json()["is_set"] is False

        patched = await client.patch(
            "/api/organizations/me",
            json={"latitude": 7.3775, "longitude": 3.947, "address": "Ibadan"},
            headers=admin_headers,
        )
        assert patched.status_code == 200

        location = (await client.get("/api/organizations/me/location", headers=admin_headers)).json()
        assert location == {"latitude": 7.3775, "longitude": 3.947, "address": "Ibadan", "is_set": True}

    async def test_only_admin_can_edit(self, client, officer_headers):
        response = await client.patch(
            "/api/organizations/me", json={"name": "Renamed"}, headers=officer_headers
        )

        assert response.status_code == 403


@pytest.mark.integration
@pytest.mark.asyncio
class TestGeocodingEndpoints:
    async def test_client_config_is_public(self, client):
        response = await client.get("/api/geocoding/client-config")

        body = response.json()
        assert body["options"] == {"enableHighAccuracy": True, "timeout": 10000, "maximumAge": 0}
        assert set(body["error_messages"]) == {"1", "2", "3"}
        assert body["geocoding_enabled"] is True

    @respx.mock
    async def test_reverse(self, client, farmer_headers):
        respx.get(url__startswith=f"{MAPBOX_URL}/geocoding/v5/mapbox.places/").mock(
            return_value=httpx.Response(200, json={"features": [{"place_name": "Ibadan, Oyo, Nigeria"}]})
        )

        response = await client.get(
            "/api/geocoding/reverse", params={"latitude": 7.3775, "longitude": 3.947}, headers=farmer_headers
        )

        assert response.status_code == 200
        assert response.json()["place_name"] == "Ibadan, Oyo, Nigeria"

    @respx.mock
    async def test_upstream_failure_is_bad_gateway(self, client, admin_headers):
        respx.get(url__startswith=f"{MAPBOX_URL}/geocoding/v5/mapbox.places/").mock(
            return_value=httpx.Response(500)
        )

        response = await client.get(
            "/api/geocoding/reverse", params={"latitude": 7.3775, "longitude": 3.947}, headers=admin_headers
        )

        assert response.status_code == 502
        assert _error(response)["code"] == "EXTERNAL_SERVICE_ERROR"

    async def test_coordinates_are_validated(self, client, admin_headers):
        response = await client.get(
            "/api/geocoding/reverse", params={"latitude": 95, "longitude": 3.9}, headers=admin_headers
        )

        assert response.status_code == 422


@pytest.mark.integration
@pytest.mark.asyncio
class TestUploadEndpoints:
    @respx.mock
    async def test_upload_image(self, client, admin_headers, org_a):
        respx.post(url__startswith=f"{STORAGE_URL}/storage/v1/object/images/").mock(
            return_value=httpx.Response(200, json={})
        )

        response = await client.post(
            "/api/uploads/images", files={"file": ("field.png", PNG, "image/png")}, headers=admin_headers
        )

        assert response.status_code == 201
        assert response.json()["path"].startswith(f"{org_a.id}/")

    async def test_rejects_non_images(self, client, admin_headers):
        response = await client.post(
            "/api/uploads/images", files={"file": ("notes.txt", b"hello", "text/plain")}, headers=admin_headers
        )

        assert response.status_code == 422
        assert _error(response)["code"] == "INVALID_FILE_TYPE"

    async def test_farmer_role_cannot_upload(self, client, farmer_headers):
        response = await client.post(
            "/api/uploads/images", files={"file": ("field.png", PNG, "image/png")}, headers=farmer_headers
        )

        assert response.status_code == 403

    @respx.mock
    async def test_crop_image(self, client, admin_headers):
        respx.post(url__startswith=f"{STORAGE_URL}/storage/v1/object/images/").mock(
            return_value=httpx.Response(200, json={})
        )
        crop = (await client.post("/api/crops/", json={"crop_name": "Maize"}, headers=admin_headers)).json()

        response = await client.post(
            f"/api/crops/{crop['id']}/image",
            files={"file": ("maize.jpg", PNG, "image/jpeg")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["image_url"].startswith(f"{STORAGE_URL}/storage/v1/object/public/images/")


@pytest.mark.integration
@pytest.mark.asyncio
class TestCropInputEndpoints:
    async def test_application_round_trip(self, client, admin_headers):
        body = {
            "product_name": "NPK 15-15-15",
            "product_type": "fertilizer",
            "application_date": "2024-06-01",
            "quantity": 25,
            "unit": "kg",
        }
        created = await client.post("/api/applications/", json=body, headers=admin_headers)
        assert created.status_code == 201
        application_id = created.json()["id"]

        patched = await client.patch(
            f"/api/applications/{application_id}", json={"cost": 9500}, headers=admin_headers
        )
        assert patched.json()["cost"] == 9500
        assert patched.json()["product_name"] == "NPK 15-15-15"

        listing = await client.get(
            "/api/applications/", params={"product_type": "fertilizer"}, headers=admin_headers
        )
        assert listing.json()["total"] == 1

        deleted = await client.delete(f"/api/applications/{application_id}", headers=admin_headers)
        assert deleted.status_code == 204

    async def test_growth_timeline_for_crop(self, client, admin_headers):
        crop = (await client.post("/api/crops/", json={"crop_name": "Rice"}, headers=admin_headers)).json()

        created = await client.post(
            "/api/growth-records/",
            json={"crop_id": crop["id"], "stage_name": "Tillering", "start_date": "2024-07-01", "health_score": 85},
            headers=admin_headers,
        )
        assert created.status_code == 201

        timeline = await client.get(
            "/api/growth-records/", params={"crop_id": crop["id"]}, headers=admin_headers
        )
        assert [r["stage_name"] for r in timeline.json()["items"]] == ["Tillering"]

    async def test_growth_record_on_other_organizations_crop(self, client, admin_headers, other_org_headers):
        crop = (await client.post("/api/crops/", json={"crop_name": "Rice"}, headers=admin_headers)).json()

        response = await client.post(
            "/api/growth-records/",
            json={"crop_id": crop["id"], "stage_name": "Tillering", "start_date": "2024-07-01"},
            headers=other_org_headers,
        )

        assert response.status_code == 404
        assert _error(response)["code"] == "RESOURCE_NOT_FOUND"

    async def test_farmer_role_cannot_log_applications(self, client, farmer_headers):
        response = await client.post(
            "/api/applications/",
            json={
                "product_name": "Urea",
                "product_type": "fertilizer",
                "application_date": "2024-06-01",
                "quantity": 10,
                "unit": "kg",
            },
            headers=farmer_headers,
        )

        assert response.status_code == 403
