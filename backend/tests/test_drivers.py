"""
Integration tests for driver accounts.

The singular /api/driver path is exercised alongside /api/drivers because
older client pages still use it.
"""

import pytest


@pytest.fixture
async def registered_driver(client, driver_payload):
    """Register a driver and return its id."""
    response = await client.post("/api/drivers", json=driver_payload)
    assert response.status_code == 201
    return response.json()["driver"]["DriverID"]


@pytest.fixture
def driver_token(make_token, registered_driver):
    return make_token("sam@example.com", ["driver"], driver_id=registered_driver)


@pytest.mark.asyncio
async def test_register_driver_defaults_to_active(client, driver_payload):
    response = await client.post("/api/driver", json=driver_payload)
    
    assert response.status_code == 201
    driver_id = response.json()["driver"]["DriverID"]
    
    listing = await client.get("/api/drivers", params={"email": "sam@example.com"})
    driver = listing.json()["drivers"][0]
    assert driver["DriverID"] == driver_id
    assert driver["Status"] == "active"
    assert driver["VehicleMake"] == "Honda"
    assert driver["InsuranceID"] == 77


@pytest.mark.asyncio
async def test_register_driver_with_status_from_form(client, driver_payload):
    """The sign-up form sends the lowercase status values."""
    driver_payload["Status"] = "active"
    response = await client.post("/api/drivers", json=driver_payload)

    assert response.status_code == 201
    listing = await client.get("/api/drivers", params={"status": "active"})
    assert listing.json()["drivers"][0]["Status"] == "active"

    other = dict(driver_payload, Email="idle@example.com", Status="inactive")
    response = await client.post("/api/drivers", json=other)
    assert response.status_code == 201
    listing = await client.get("/api/drivers", params={"email": "idle@example.com"})
    assert listing.json()["drivers"][0]["Status"] == "inactive"


@pytest.mark.asyncio
async def test_register_driver_duplicate_email(client, driver_payload, registered_driver):
    response = await client.post("/api/drivers", json=driver_payload)
    
    assert response.status_code == 409
    assert response.json()["error"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_driver_missing_fields(client, driver_payload):
    del driver_payload["DateOfBirth"]
    del driver_payload["Email"]
    response = await client.post("/api/drivers", json=driver_payload)
    
    assert response.status_code == 400
    assert set(response.json()["details"]["fields"]) == {"DateOfBirth", "Email"}


@pytest.mark.asyncio
async def test_register_driver_invalid_email(client, driver_payload):
    driver_payload["Email"] = "not-an-email"
    response = await client.post("/api/drivers", json=driver_payload)
    
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_singular_and_plural_paths_list_same_drivers(client, registered_driver):
    plural = await client.get("/api/drivers")
    singular = await client.get("/api/driver")
    
    assert plural.status_code == singular.status_code == 200
    assert plural.json()["drivers"] == singular.json()["drivers"]


@pytest.mark.asyncio
async def test_get_own_driver(client, registered_driver, driver_token):
    response = await client.get(
        f"/api/driver/{registered_driver}",
        headers={"Authorization": f"Bearer {driver_token}"}
    )
    
    assert response.status_code == 200
    assert response.json()["driver"]["VehicleLicensePlate"] == "ABC 123"


@pytest.mark.asyncio
async def test_get_driver_with_rider_token_forbidden(client, registered_driver, make_token):
    token = make_token("sam@example.com", ["rider"], rider_id=1)
    response = await client.get(
        f"/api/drivers/{registered_driver}",
        headers={"Authorization": f"Bearer {token}"}
    )
    
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_driver_vehicle(client, registered_driver, driver_token):
    response = await client.put(
        f"/api/drivers/{registered_driver}",
        json={"VehicleColor": "Red", "VehicleID": None},
        headers={"Authorization": f"Bearer {driver_token}"}
    )
    
    assert response.status_code == 200
    driver = response.json()["driver"]
    assert driver["VehicleColor"] == "Red"
    assert driver["VehicleID"] is None
    assert driver["FirstName"] == "Sam"


@pytest.mark.asyncio
async def test_update_driver_status_not_editable(client, registered_driver, driver_token):
    """Status is ignored on update; deactivation goes through DELETE."""
    response = await client.put(
        f"/api/drivers/{registered_driver}",
        json={"Status": "inactive", "City": "Eugene"},
        headers={"Authorization": f"Bearer {driver_token}"}
    )
    
    assert response.status_code == 200
    assert response.json()["driver"]["Status"] == "active"
    assert response.json()["driver"]["City"] == "Eugene"


@pytest.mark.asyncio
async def test_deactivate_driver_twice(client, registered_driver):
    response = await client.delete(f"/api/driver/{registered_driver}")
    assert response.status_code == 200
    
    response = await client.delete(f"/api/drivers/{registered_driver}")
    assert response.status_code == 400
    assert response.json()["error"] == "Account is already inactive"
    
    listing = await client.get("/api/drivers", params={"status": "inactive"})
    assert listing.json()["total"] == 1


@pytest.mark.asyncio
async def test_deactivate_unknown_driver(client):
    response = await client.delete("/api/drivers/404")
    assert response.status_code == 404
    assert response.json()["error"] == "Driver not found"
