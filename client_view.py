from typing import List, Optional

from logging_config import get_logger

logger = get_logger(__name__)


class ClientView:
    """Presentation-side mirror of a room, driven only by server messages.

    ``handle`` consumes ``joined``/``full``/``state``/``gameOver`` messages;
    ``join``/``play``/``reset`` return the intent to send, or None when the
    local state says the intent would be pointless.
    """

    def __init__(self):
        self.room_id: Optional[str] = None
        self.pending_room_id: Optional[str] = None
        self.symbol: Optional[str] = None
        self.board: List[Optional[str]] = [None] * 9
        self.players: List[str] = []
        self.turn = "X"
        self.winner_line: List[int] = []
        self.game_over = False
        self.status_text = "Waiting for players..."

    @property
    def joined(self) -> bool:
        return self.symbol is not None

    def handle(self, message: dict):
        kind = message.get("type")
        if kind == "joined":
            self.symbol = message["symbol"]
            self.room_id = self.pending_room_id
            self.status_text = f"Joined as {self.symbol}"
        elif kind == "full":
            self.status_text = "Room is full"
        elif kind == "state":
            self.board = list(message["board"])
            self.players = list(message["players"])
            self.turn = message["turn"]
            self.winner_line = list(message.get("winnerLine") or [])
            if not self.winner_line and not any(self.board):
                self.game_over = False
            if not self.game_over:
                self.status_text = "Your turn" if self.turn == self.symbol else "Opponent's turn"
        elif kind == "gameOver":
            self.game_over = True
            if message.get("disconnected"):
                self.status_text = "Opponent disconnected"
            elif message.get("winner") is None:
                self.status_text = "Draw!"
            else:
                self.status_text = "You win!" if message["winner"] == self.symbol else "You lose."
        else:
            logger.warning(f"Ignoring unknown message type {kind!r}")

    def join(self, room_id: str) -> Optional[dict]:
        room_id = room_id.strip()
        if not room_id:
            return None
        self.pending_room_id = room_id
        return {"type": "join", "roomId": room_id}

    def play(self, index: int) -> Optional[dict]:
        if not self.joined or self.game_over:
            return None
        if not 0 <= index < len(self.board) or self.board[index] is not None:
            return None
        if self.turn != self.symbol:
            return None
        return {"type": "play", "roomId": self.room_id, "index": index, "symbol": self.symbol}

    def reset(self) -> Optional[dict]:
        if not self.joined:
            return None
        return {"type": "reset", "roomId": self.room_id}

    def render(self) -> str:
        rows = []
        for start in (0, 3, 6):
            cells = []
            for index in range(start, start + 3):
                mark = self.board[index] or " "
                cells.append(f"[{mark}]" if index in self.winner_line else f" {mark} ")
            rows.append("|".join(cells))
        grid = "\n---+---+---\n".join(rows)
        return f"{grid}\n{self.status_text}"
