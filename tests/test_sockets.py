import random

import pytest

from fishing_game.app import GAME_NAMESPACE, create_app
from fishing_game.core.models import FishSpecies
from fishing_game.game.managers.fish_catalog import FishCatalog

from .conftest import MemoryStatsRepository


@pytest.fixture
def app_and_socketio():
    catalog = FishCatalog([FishSpecies(id=0, name="Salmon", base_weight=10.0, base_length=5.0)],
                          rng=random.Random(5))
    return create_app(repository=MemoryStatsRepository(), catalog=catalog)


@pytest.fixture
def client(app_and_socketio):
    app, socketio = app_and_socketio
    client = socketio.test_client(app, namespace=GAME_NAMESPACE)
    yield client
    if client.is_connected(GAME_NAMESPACE):
        client.disconnect(namespace=GAME_NAMESPACE)


def events(client, name):
    return [msg["args"][0] for msg in client.get_received(GAME_NAMESPACE) if msg["name"] == name]


def test_connect_sends_game_state(client):
    states = events(client, "game_state")
    assert len(states) == 1
    assert states[0]["phase"] == "active_day"
    assert states[0]["session"]["state"] == "idle"


def test_reel_without_bite_is_rejected(client):
    client.get_received(GAME_NAMESPACE)
    client.emit("reel", namespace=GAME_NAMESPACE)

    rejected = events(client, "action_rejected")
    assert rejected[0]["action"] == "reel"


def test_cast_then_catch_over_socket(app_and_socketio, client):
    app, _ = app_and_socketio
    host = app.extensions["fishing_game"]

    client.emit("cast", {"strength": 0.4}, namespace=GAME_NAMESPACE)
    assert host.service.session.state.value == "waiting_for_bite"

    host.service.tick(3.0)
    client.get_received(GAME_NAMESPACE)
    client.emit("reel", namespace=GAME_NAMESPACE)

    catches = events(client, "catch_result")
    assert len(catches) == 1
    assert catches[0]["species_id"] == 0
    assert host.service.economy.economy.money == catches[0]["money_earned"]


def test_abandoned_catch_is_reported(app_and_socketio, client):
    app, _ = app_and_socketio
    host = app.extensions["fishing_game"]

    client.emit("cast", namespace=GAME_NAMESPACE)
    host.service.tick(3.0)
    eel = FishSpecies(id=9, name="Eel", base_weight=1.0, base_length=1.0)
    host.service.attach_scene_context(FishCatalog([eel], rng=random.Random(3)), host.service.presentation)
    client.get_received(GAME_NAMESPACE)
    client.emit("reel", namespace=GAME_NAMESPACE)

    received = client.get_received(GAME_NAMESPACE)
    abandoned = [msg["args"][0] for msg in received if msg["name"] == "catch_abandoned"]
    assert abandoned == [{"reason": "Fish species with ID '0' not found."}]
    assert not [msg for msg in received if msg["name"] in ("catch_result", "error")]
    assert host.service.session.can_cast


def test_bad_cast_payload_is_rejected(client):
    client.get_received(GAME_NAMESPACE)
    client.emit("cast", {"strength": "hard"}, namespace=GAME_NAMESPACE)
    assert events(client, "action_rejected")[0]["reason"] == "Invalid cast data format."


def test_http_routes(app_and_socketio):
    app, _ = app_and_socketio
    http = app.test_client()

    assert http.get("/health").get_json() == {"status": "ok"}
    state = http.get("/state").get_json()
    assert state["economy"]["day"] == 1
    assert state["time"] == "08:00"
