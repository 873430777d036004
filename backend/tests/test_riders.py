"""
Integration tests for rider accounts.

Covers registration, e-mail uniqueness, owner-only reads/edits and soft deletion.
"""

import pytest

# Note: Client and DB setup are in conftest.py


@pytest.fixture
async def registered_rider(client, rider_payload):
    """Register a rider and return its id."""
    response = await client.post("/api/riders", json=rider_payload)
    assert response.status_code == 201
    return response.json()["rider"]["RiderID"]


@pytest.fixture
def rider_token(make_token, registered_rider):
    return make_token("jane@example.com", ["rider"], rider_id=registered_rider)


# TEST 1: Registration
@pytest.mark.asyncio
async def test_register_rider_success(client, rider_payload):
    """A rider can register and gets a summary back."""
    response = await client.post("/api/riders", json=rider_payload)
    
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Rider registered successfully"
    assert data["rider"]["Email"] == "jane@example.com"
    assert data["rider"]["FirstName"] == "Jane"
    assert "RiderID" in data["rider"]


@pytest.mark.asyncio
async def test_register_rider_duplicate_email(client, rider_payload, registered_rider):
    """Registering the same e-mail twice yields 409, regardless of case."""
    rider_payload["Email"] = "JANE@example.com"
    response = await client.post("/api/riders", json=rider_payload)
    
    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "Email already registered"
    assert data["error_code"] == "ERR_CONFLICT_001"


@pytest.mark.asyncio
async def test_register_rider_missing_fields(client, rider_payload):
    """Missing or blank required fields yield 400 listing the fields."""
    del rider_payload["City"]
    rider_payload["LastName"] = "   "
    response = await client.post("/api/riders", json=rider_payload)
    
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Missing required fields"
    assert set(data["details"]["fields"]) == {"City", "LastName"}


@pytest.mark.asyncio
async def test_register_rider_null_and_empty_fields(client, rider_payload):
    """Null and empty values count as missing, whatever the field's type."""
    rider_payload["FirstName"] = None
    rider_payload["DateOfBirth"] = ""
    rider_payload["Email"] = ""
    response = await client.post("/api/riders", json=rider_payload)

    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "ERR_MISSING_FIELDS"
    assert set(data["details"]["fields"]) == {"FirstName", "DateOfBirth", "Email"}


@pytest.mark.asyncio
async def test_register_rider_missing_field_alongside_invalid_one(client, rider_payload):
    """A missing field wins over an unrelated invalid one."""
    del rider_payload["FirstName"]
    rider_payload["Email"] = "not-an-email"
    response = await client.post("/api/riders", json=rider_payload)

    assert response.status_code == 400
    assert response.json()["details"]["fields"] == ["FirstName"]


@pytest.mark.asyncio
async def test_register_rider_invalid_location_status(client, rider_payload):
    """Values outside the enumeration are a validation error, not a missing field."""
    rider_payload["LocationStatus"] = "maybe"
    response = await client.post("/api/riders", json=rider_payload)
    
    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


# TEST 2: Listing
@pytest.mark.asyncio
async def test_list_riders_filtered_by_email(client, rider_payload, registered_rider):
    """The client filters riders by the signed-in e-mail."""
    other = dict(rider_payload, Email="other@example.com", FirstName="Olive")
    assert (await client.post("/api/riders", json=other)).status_code == 201
    
    response = await client.get("/api/riders", params={"email": "Jane@Example.com"})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["riders"][0]["RiderID"] == registered_rider
    assert data["riders"][0]["AccountStatus"] == "active"
    assert data["riders"][0]["LocationStatus"] == "off"
    
    response = await client.get("/api/riders")
    assert response.json()["total"] == 2


# TEST 3: Owner-only read
@pytest.mark.asyncio
async def test_get_rider_requires_token(client, registered_rider):
    response = await client.get(f"/api/riders/{registered_rider}")
    assert response.status_code == 401
    assert response.json()["error"] == "Access token required"


@pytest.mark.asyncio
async def test_get_own_rider(client, registered_rider, rider_token):
    response = await client.get(
        f"/api/riders/{registered_rider}",
        headers={"Authorization": f"Bearer {rider_token}"}
    )
    
    assert response.status_code == 200
    rider = response.json()["rider"]
    assert rider["Email"] == "jane@example.com"
    assert rider["DateOfBirth"] == "1992-04-11"


@pytest.mark.asyncio
async def test_get_other_rider_forbidden(client, registered_rider, make_token):
    token = make_token("mallory@example.com", ["rider"], rider_id=registered_rider + 1)
    response = await client.get(
        f"/api/riders/{registered_rider}",
        headers={"Authorization": f"Bearer {token}"}
    )
    
    assert response.status_code == 403
    assert response.json()["error"] == "You can only access your own account"
    assert response.json()["error_code"] == "ERR_PERM_001"


@pytest.mark.asyncio
async def test_get_rider_requires_rider_role(client, registered_rider, make_token):
    token = make_token("jane@example.com", ["driver"], rider_id=registered_rider)
    response = await client.get(
        f"/api/riders/{registered_rider}",
        headers={"Authorization": f"Bearer {token}"}
    )
    
    assert response.status_code == 403
    assert "Required role: rider" in response.json()["error"]
    assert response.json()["error_code"] == "ERR_PERM_001"


@pytest.mark.asyncio
async def test_get_unknown_rider(client, make_token):
    token = make_token("ghost@example.com", ["rider"], rider_id=999)
    response = await client.get("/api/riders/999", headers={"Authorization": f"Bearer {token}"})
    
    assert response.status_code == 404
    assert response.json()["error"] == "Rider not found"


@pytest.mark.asyncio
async def test_invalid_token_rejected(client, registered_rider):
    response = await client.get(
        f"/api/riders/{registered_rider}",
        headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


# TEST 4: Update
@pytest.mark.asyncio
async def test_update_rider_partial(client, registered_rider, rider_token):
    """Only supplied fields change."""
    response = await client.put(
        f"/api/riders/{registered_rider}",
        json={"City": "Salem", "LocationStatus": "on"},
        headers={"Authorization": f"Bearer {rider_token}"}
    )
    
    assert response.status_code == 200
    rider = response.json()["rider"]
    assert rider["City"] == "Salem"
    assert rider["LocationStatus"] == "on"
    assert rider["FirstName"] == "Jane"
    assert rider["PhoneNumber"] == "555-0101"


@pytest.mark.asyncio
async def test_update_rider_clear_phone(client, registered_rider, rider_token):
    response = await client.put(
        f"/api/riders/{registered_rider}",
        json={"PhoneNumber": None},
        headers={"Authorization": f"Bearer {rider_token}"}
    )
    
    assert response.status_code == 200
    assert response.json()["rider"]["PhoneNumber"] is None


@pytest.mark.asyncio
async def test_update_rider_email_conflict(client, rider_payload, registered_rider, rider_token):
    other = dict(rider_payload, Email="taken@example.com")
    assert (await client.post("/api/riders", json=other)).status_code == 201
    
    response = await client.put(
        f"/api/riders/{registered_rider}",
        json={"Email": "taken@example.com"},
        headers={"Authorization": f"Bearer {rider_token}"}
    )
    
    assert response.status_code == 409
    assert response.json()["error"] == "Email already in use"


# TEST 5: Soft delete
@pytest.mark.asyncio
async def test_deactivate_rider_twice(client, registered_rider):
    """Second deactivation yields 400."""
    response = await client.delete(f"/api/riders/{registered_rider}")
    assert response.status_code == 200
    assert response.json()["message"] == "Account deactivated successfully"
    
    response = await client.delete(f"/api/riders/{registered_rider}")
    assert response.status_code == 400
    assert response.json()["error"] == "Account is already inactive"


@pytest.mark.asyncio
async def test_deactivated_rider_row_kept(client, registered_rider):
    """Soft delete keeps the row and flips its status."""
    await client.delete(f"/api/riders/{registered_rider}")
    
    response = await client.get("/api/riders", params={"status": "inactive"})
    data = response.json()
    assert data["total"] == 1
    assert data["riders"][0]["AccountStatus"] == "inactive"


@pytest.mark.asyncio
async def test_deactivation_revokes_open_sessions(client, registered_rider, rider_token):
    """Tokens issued before deactivation stop working."""
    await client.delete(f"/api/riders/{registered_rider}")
    
    response = await client.get(
        f"/api/riders/{registered_rider}",
        headers={"Authorization": f"Bearer {rider_token}"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Account access has been revoked"
    assert response.json()["error_code"] == "ERR_AUTH_002"


@pytest.mark.asyncio
async def test_deactivate_unknown_rider(client):
    response = await client.delete("/api/riders/12345")
    assert response.status_code == 404
