"""Tests for the FastAPI Tic-Tac-Toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = 0.0


def _new_game(ai_mode: bool = False) -> dict:
    response = client.post("/api/game", json={"aiMode": ai_mode})
    assert response.status_code == 200
    return response.json()


def test_create_game_and_first_move():
    payload = _new_game()
    assert payload["activeMark"] == "O"
    assert payload["board"] == [""] * 9
    assert payload["status"] == "in_progress"
    assert payload["legalMoves"] == list(range(9))

    move_response = client.post(
        f"/api/game/{payload['id']}/move", json={"index": 4}
    )
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["board"][4] == "O"
    assert state["moveCount"] == 1
    assert state["activeMark"] == "X"
    assert state["aiPending"] is False
    assert state["lastMove"] == {"player": "O", "index": 4}


def test_ai_replies_after_human_move():
    game_id = _new_game(ai_mode=True)["id"]

    move_response = client.post(f"/api/game/{game_id}/move", json={"index": 0})
    assert move_response.status_code == 200

    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    state = follow_up.json()
    assert state["board"][4] == "X"
    assert state["aiPending"] is False
    assert state["activeMark"] == "O"
    assert state["moveLog"][-1] == {"player": "X", "index": 4}


def test_invalid_move_rejected():
    game_id = _new_game()["id"]

    first_move = client.post(f"/api/game/{game_id}/move", json={"index": 0})
    assert first_move.status_code == 200

    duplicate_move = client.post(f"/api/game/{game_id}/move", json={"index": 0})
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"]

    out_of_range = client.post(f"/api/game/{game_id}/move", json={"index": 9})
    assert out_of_range.status_code == 400


def test_win_message():
    game_id = _new_game()["id"]
    for index in (0, 3, 1, 4, 2):
        response = client.post(f"/api/game/{game_id}/move", json={"index": index})
        assert response.status_code == 200
    state = response.json()
    assert state["status"] == "won"
    assert state["winner"] == "O"
    assert state["message"] == "Congratulations, Winner is O"
    assert state["legalMoves"] == []

    late = client.post(f"/api/game/{game_id}/move", json={"index": 8})
    assert late.status_code == 400


def test_reset_clears_board_and_keeps_mode():
    game_id = _new_game(ai_mode=True)["id"]
    client.post(f"/api/game/{game_id}/move", json={"index": 0})

    response = client.post(f"/api/game/{game_id}/reset")
    assert response.status_code == 200
    state = response.json()
    assert state["board"] == [""] * 9
    assert state["moveLog"] == []
    assert state["aiMode"] is True


def test_toggle_ai_mode_restarts_game():
    game_id = _new_game()["id"]
    client.post(f"/api/game/{game_id}/move", json={"index": 0})

    response = client.post(f"/api/game/{game_id}/ai-mode", json={"enabled": True})
    assert response.status_code == 200
    state = response.json()
    assert state["aiMode"] is True
    assert state["board"] == [""] * 9


def test_stale_ai_move_is_dropped():
    game_id = _new_game(ai_mode=True)["id"]
    session = ui.SESSIONS[game_id]
    ui._apply_player_move(game_id, session, 0)
    epoch = session.epoch
    assert session.state.ai_pending

    client.post(f"/api/game/{game_id}/reset")
    ui._run_ai_turn(game_id, epoch)

    assert session.state.board == ("",) * 9
    assert not session.state.ai_pending


def test_missing_game_returns_404():
    missing = client.get("/api/game/INVALID")
    assert missing.status_code == 404


def test_index_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic Tac Toe" in response.text


def test_draw_message():
    game_id = _new_game()["id"]
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        response = client.post(f"/api/game/{game_id}/move", json={"index": index})
        assert response.status_code == 200
    state = response.json()
    assert state["status"] == "draw"
    assert state["drawn"] is True
    assert state["winner"] is None
    assert state["message"] == "Game was a Draw."


def test_ai_mode_toggle_drops_stale_ai_move():
    game_id = _new_game(ai_mode=True)["id"]
    session = ui.SESSIONS[game_id]
    ui._apply_player_move(game_id, session, 0)
    epoch = session.epoch
    assert session.state.ai_pending

    response = client.post(f"/api/game/{game_id}/ai-mode", json={"enabled": True})
    assert response.status_code == 200
    ui._run_ai_turn(game_id, epoch)

    assert session.state.board == ("",) * 9
    assert session.move_log == []
    assert not session.state.ai_pending
