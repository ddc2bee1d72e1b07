import pytest

from board import Symbol
from exceptions import InvalidIntent
from schemas.messages import Full, GameOver, JoinIntent, Joined, PlayIntent, ResetIntent, State, parse_intent


class TestParseIntent:

    def test_join(self):
        intent = parse_intent('{"type": "join", "roomId": "r1"}')

        assert isinstance(intent, JoinIntent)
        assert intent.room_id == "r1"

    def test_play(self):
        intent = parse_intent({"type": "play", "roomId": "r1", "index": 4, "symbol": "O"})

        assert isinstance(intent, PlayIntent)
        assert intent.index == 4
        assert intent.symbol is Symbol.O

    def test_reset(self):
        assert isinstance(parse_intent({"type": "reset", "roomId": "r1"}), ResetIntent)

    @pytest.mark.parametrize("raw", [
        "not json",
        "[1, 2]",
        {"type": "chat", "roomId": "r1"},
        {"roomId": "r1"},
        {"type": "join"},
        {"type": "join", "roomId": ""},
        {"type": "join", "roomId": "r" * 65},
        {"type": "play", "roomId": "r1", "index": "4", "symbol": "X"},
        {"type": "play", "roomId": "r1", "index": 4, "symbol": "Z"},
        {"type": "play", "roomId": "r1", "symbol": "X"},
        {"type": "join", "roomId": "r1", "symbol": "X"},
        {"type": "reset", "roomId": "r1", "index": 0},
    ])
    def test_rejects_malformed(self, raw):
        with pytest.raises(InvalidIntent):
            parse_intent(raw)


class TestOutbound:

    def test_joined(self):
        assert Joined(symbol=Symbol.X).to_dict() == {"type": "joined", "symbol": "X"}

    def test_full(self):
        assert Full().to_dict() == {"type": "full"}

    def test_state_omits_missing_winner_line(self):
        state = State(board=[None] * 9, players=["a"], turn=Symbol.X)

        assert state.to_dict() == {"type": "state", "board": [None] * 9, "players": ["a"], "turn": "X"}

    def test_state_from_snapshot_keeps_winner_line(self):
        snapshot = {
            "board": ["X", "X", "X", "O", "O", None, None, None, None],
            "players": ["a", "b"],
            "turn": "X",
            "status": "finished",
            "winnerLine": [0, 1, 2],
        }

        data = State.from_snapshot(snapshot).to_dict()

        assert data["winnerLine"] == [0, 1, 2]
        assert data["board"][:3] == ["X", "X", "X"]
        assert "status" not in data

    def test_game_over_keeps_null_winner(self):
        assert GameOver(disconnected=True).to_dict() == {"type": "gameOver", "winner": None, "disconnected": True}
