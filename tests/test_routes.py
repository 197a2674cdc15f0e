"""Tests for the REST and WebSocket endpoints."""

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from duelboard.main import app
from duelboard.schemas.game_engine import GameState
from duelboard.services.game.session import GameSession, set_game_session
from duelboard.services.websocket.manager import set_connection_manager


@pytest.fixture
def client(game_south_turn: GameState):
    set_game_session(GameSession(game_south_turn))
    set_connection_manager(None)
    with TestClient(app) as test_client:
        yield test_client
    set_game_session(None)
    set_connection_manager(None)


class TestHealth:
    def test_root(self, client: TestClient):
        assert client.get("/").json() == {"message": "Duel Board API"}

    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "healthy"}


class TestGameRoutes:
    """Test GET /game/state and POST /game/commands."""

    def test_get_state(self, client: TestClient):
        response = client.get("/api/v1/game/state", params={"seat": 0})

        assert response.status_code == 200
        body = response.json()
        assert body["cursor_position"] == {"x": 0, "y": -5}
        assert [c["id"] for c in body["hand_cards"]] == [6, 7, 8]

    def test_get_state_unknown_seat(self, client: TestClient):
        assert client.get("/api/v1/game/state", params={"seat": 4}).status_code == 404

    def test_post_command(self, client: TestClient):
        response = client.post(
            "/api/v1/game/commands",
            json={"seat": 0, "command": {"command_type": "start_summon"}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["events"][0]["event_type"] == "summon_started"
        assert body["state"]["summoning_state"]["phase"] == "target"

    def test_ignored_command_is_not_an_http_error(self, client: TestClient):
        response = client.post(
            "/api/v1/game/commands",
            json={"seat": 1, "command": {"command_type": "start_summon"}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "NOT_YOUR_TURN"
        assert body["state"] is None

    def test_post_key(self, client: TestClient):
        response = client.post("/api/v1/game/commands", json={"seat": 0, "key": "k"})

        body = response.json()
        assert body["success"] is True
        assert body["state"]["staging_state"]["piece"] == {"kind": "player", "id": 1}

    def test_unmapped_key(self, client: TestClient):
        response = client.post("/api/v1/game/commands", json={"seat": 0, "key": "z"})
        assert response.json()["error_code"] == "UNMAPPED_KEY"

    def test_unknown_command_type(self, client: TestClient):
        response = client.post(
            "/api/v1/game/commands", json={"seat": 0, "command": {"command_type": "attack"}}
        )
        assert response.status_code == 422

    def test_command_and_key_together(self, client: TestClient):
        response = client.post(
            "/api/v1/game/commands",
            json={"seat": 0, "key": "k", "command": {"command_type": "cancel"}},
        )
        assert response.status_code == 422

    def test_reset(self, client: TestClient):
        client.post(
            "/api/v1/game/commands",
            json={"seat": 0, "command": {"command_type": "start_summon"}},
        )
        response = client.post("/api/v1/game/reset", json={"tile_seed": 5})

        assert response.status_code == 200
        assert response.json()["summoning_state"] is None


class TestWebSocket:
    """Test the /ws endpoint."""

    def test_connect_sends_connected_then_state(self, client: TestClient):
        with client.websocket_connect("/api/v1/ws?seat=0") as ws:
            connected = ws.receive_json()
            assert connected["type"] == "connected"
            assert connected["payload"]["seat"] == 0

            state = ws.receive_json()
            assert state["type"] == "game_state"
            assert state["payload"]["state"]["cursor_position"] == {"x": 0, "y": -5}

    def test_unknown_seat_is_refused(self, client: TestClient):
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/api/v1/ws?seat=5") as ws:
                ws.receive_json()

    def test_ping(self, client: TestClient):
        with client.websocket_connect("/api/v1/ws?seat=0") as ws:
            ws.receive_json()
            ws.receive_json()

            ws.send_json({"type": "ping", "request_id": "p1"})
            pong = ws.receive_json()
            assert pong["type"] == "pong"
            assert pong["request_id"] == "p1"

    def test_command_then_state_sync(self, client: TestClient):
        with client.websocket_connect("/api/v1/ws?seat=0") as ws:
            ws.receive_json()
            ws.receive_json()

            ws.send_json(
                {
                    "type": "game_command",
                    "request_id": "c1",
                    "payload": {"command": {"command_type": "start_summon"}},
                }
            )
            events = ws.receive_json()
            assert events["type"] == "game_events"
            assert events["request_id"] == "c1"
            assert events["payload"]["events"][0]["event_type"] == "summon_started"

            synced = ws.receive_json()
            assert synced["type"] == "game_state"
            assert synced["payload"]["state"]["summoning_state"]["phase"] == "target"

    def test_key_command(self, client: TestClient):
        with client.websocket_connect("/api/v1/ws?seat=0") as ws:
            ws.receive_json()
            ws.receive_json()

            ws.send_json({"type": "game_command", "payload": {"key": "j"}})
            assert ws.receive_json()["type"] == "game_events"
            assert ws.receive_json()["type"] == "game_state"

    def test_rejected_command(self, client: TestClient):
        with client.websocket_connect("/api/v1/ws?seat=0") as ws:
            ws.receive_json()
            ws.receive_json()

            ws.send_json({"type": "game_command", "payload": {"command": {"command_type": "flip"}}})
            rejected = ws.receive_json()
            assert rejected["type"] == "game_rejected"
            assert rejected["payload"]["error_code"] == "NOT_STAGING"

    def test_other_seat_hears_events(self, client: TestClient):
        with client.websocket_connect("/api/v1/ws?seat=0") as south:
            south.receive_json()
            south.receive_json()
            with client.websocket_connect("/api/v1/ws?seat=1") as north:
                north.receive_json()
                north.receive_json()

                south.send_json(
                    {"type": "game_command", "payload": {"command": {"command_type": "start_summon"}}}
                )
                assert south.receive_json()["type"] == "game_events"

                broadcast = north.receive_json()
                assert broadcast["type"] == "game_events"
                synced = north.receive_json()
                assert synced["type"] == "game_state"
                assert [c["id"] for c in synced["payload"]["state"]["hand_cards"]] == [20]

    def test_invalid_json(self, client: TestClient):
        with client.websocket_connect("/api/v1/ws?seat=0") as ws:
            ws.receive_json()
            ws.receive_json()

            ws.send_text("not json")
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["payload"]["error_code"] == "INVALID_JSON"

    def test_invalid_payload(self, client: TestClient):
        with client.websocket_connect("/api/v1/ws?seat=0") as ws:
            ws.receive_json()
            ws.receive_json()

            ws.send_json({"type": "game_command", "payload": {}})
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["payload"]["error_code"] == "VALIDATION_ERROR"

    def test_get_state(self, client: TestClient):
        with client.websocket_connect("/api/v1/ws?seat=1") as ws:
            ws.receive_json()
            ws.receive_json()

            ws.send_json({"type": "get_state", "request_id": "s1"})
            state = ws.receive_json()
            assert state["type"] == "game_state"
            assert state["request_id"] == "s1"
