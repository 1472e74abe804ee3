import uuid

import pytest

from app.admin.controller import ACTION_REGISTRY, ActionType, dispatch, parse_action_type
from app.config import Settings, get_settings
from app.exceptions import InvalidAction, InvalidJSON, UnknownAction
from app.main import app

from conftest import ENDPOINT, FakeIdentity, add_vehicle, auth_headers


def test_every_action_type_has_a_handler() -> None:
    assert set(ACTION_REGISTRY) == set(ActionType)


@pytest.mark.parametrize("body", [[], "overview", 42, None])
def test_parse_action_type_requires_an_object(body) -> None:
    with pytest.raises(InvalidJSON):
        parse_action_type(body)


@pytest.mark.parametrize("body", [{}, {"type": "drop_tables"}, {"type": 1}, {"type": "OVERVIEW"}])
def test_parse_action_type_rejects_unlisted_types(body) -> None:
    with pytest.raises(InvalidAction):
        parse_action_type(body)


async def test_dispatch_without_registered_handler(monkeypatch) -> None:
    monkeypatch.delitem(ACTION_REGISTRY, ActionType.OVERVIEW)
    with pytest.raises(UnknownAction):
        await dispatch(None, ActionType.OVERVIEW, {"type": "overview"})


async def test_malformed_json(client, super_admin) -> None:
    response = await client.post(
        ENDPOINT,
        content=b"{not json",
        headers={**auth_headers(), "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["errorCode"] == "INVALID_JSON"


async def test_json_array_body(client, super_admin) -> None:
    response = await client.post(ENDPOINT, json=[{"type": "overview"}], headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["errorCode"] == "INVALID_JSON"


async def test_unknown_action(client, super_admin) -> None:
    response = await client.post(ENDPOINT, json={"type": "delete_everything"}, headers=auth_headers())
    assert response.status_code == 400
    body = response.json()
    assert body["errorCode"] == "INVALID_ACTION"
    assert body["error"] == "Invalid action type: delete_everything"


async def test_missing_type(client, super_admin) -> None:
    response = await client.post(ENDPOINT, json={}, headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["errorCode"] == "INVALID_ACTION"


@pytest.mark.parametrize(
    "body, field",
    [
        ({"type": "suspend_user", "userId": "not-a-uuid"}, "userId"),
        ({"type": "suspend_user"}, "userId"),
        ({"type": "suspend_user", "userId": str(uuid.uuid4()), "reason": "x" * 501}, "reason"),
        ({"type": "unsuspend_user", "userId": 7}, "userId"),
        ({"type": "set_vehicle_verification", "vehicleId": str(uuid.uuid4()), "isVerified": "yes"}, "isVerified"),
        ({"type": "set_vehicle_verification", "isVerified": True}, "vehicleId"),
        ({"type": "get_vehicle_for_claim", "registrationNumber": "   "}, "registrationNumber"),
        ({"type": "get_vehicle_for_claim", "registrationNumber": "X" * 21}, "registrationNumber"),
        ({"type": "update_claim_status", "claimId": str(uuid.uuid4()), "status": "pending"}, "status"),
        ({"type": "update_listing_status", "listingId": str(uuid.uuid4()), "status": "sold"}, "status"),
        (
            {
                "type": "update_listing_status",
                "listingId": str(uuid.uuid4()),
                "status": "approved",
                "adminNotes": "n" * 1001,
            },
            "adminNotes",
        ),
    ],
)
async def test_validation_error_names_the_field(client, super_admin, body, field) -> None:
    response = await client.post(ENDPOINT, json=body, headers=auth_headers())
    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["errorCode"] == "VALIDATION_ERROR"
    assert payload["details"]["field"] == field
    assert payload["error"].startswith(field)


async def test_extra_keys_are_ignored(client, super_admin) -> None:
    response = await client.post(
        ENDPOINT, json={"type": "overview", "sneaky": "value"}, headers=auth_headers()
    )
    assert response.status_code == 200


async def test_registration_lookup_is_normalised(client, super_admin, db) -> None:
    owner = uuid.uuid4()
    vehicle = await add_vehicle(db, owner, "KA01AB1234", maker_model="SWIFT VXI")

    response = await client.post(
        ENDPOINT,
        json={"type": "get_vehicle_for_claim", "registrationNumber": "  ka01ab1234 "},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "found": True,
        "vehicleId": str(vehicle.id),
        "ownerId": str(owner),
        "makerModel": "SWIFT VXI",
    }


async def test_registration_lookup_miss(client, super_admin) -> None:
    response = await client.post(
        ENDPOINT,
        json={"type": "get_vehicle_for_claim", "registrationNumber": "MH12ZZ0001"},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "found": False}


async def test_slow_request_times_out(client, super_admin, db, identity: FakeIdentity) -> None:
    await add_vehicle(db, uuid.uuid4(), "DL3CAB0001")
    identity.delay = 1.0
    app.dependency_overrides[get_settings] = lambda: Settings(request_timeout_seconds=0.05)

    response = await client.post(ENDPOINT, json={"type": "vehicles"}, headers=auth_headers())
    assert response.status_code == 504
    assert response.json()["errorCode"] == "REQUEST_TIMEOUT"
