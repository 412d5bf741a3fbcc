import pytest
from fastapi.testclient import TestClient

from app import fastapi_app
from backend import room_registry


@pytest.fixture
def client():
    room_registry.clear()
    yield TestClient(fastapi_app)
    room_registry.clear()


def test_room_details(client):
    room_registry.create_room("r1", "pw", "H")
    room_registry.join_room("r1", "pw", "V1")

    response = client.get("/rooms/r1")

    assert response.status_code == 200
    assert response.json() == {"room_id": "r1", "viewer_count": 1, "has_password": True}


def test_room_details_never_exposes_password(client):
    room_registry.create_room("r1", "secret", "H")
    assert "secret" not in client.get("/rooms/r1").text


def test_missing_room_is_404(client):
    response = client.get("/rooms/ghost")
    assert response.status_code == 404
    assert response.json()["detail"] == "Room not found"


def test_room_gone_after_host_removed(client):
    room_registry.create_room("r1", "", "H")
    room_registry.remove_connection("H")
    assert client.get("/rooms/r1").status_code == 404


def test_list_rooms(client):
    room_registry.create_room("open", "", "H1")
    room_registry.create_room("locked", "pw", "H2")

    response = client.get("/rooms")

    assert response.status_code == 200
    rooms = {room["room_id"]: room for room in response.json()}
    assert rooms["open"]["has_password"] is False
    assert rooms["locked"]["has_password"] is True
    assert rooms["locked"]["viewer_count"] == 0
