import threading
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from board import Board, Outcome, OutcomeKind, Symbol, apply_move, evaluate
from exceptions import NotYourTurn, RoomFull, RoomNotInProgress, UnauthorizedSymbol
from logging_config import get_logger

logger = get_logger(__name__)

SEAT_ORDER = (Symbol.X, Symbol.O)


class RoomStatus(str, Enum):
    WAITING_FOR_PLAYERS = "waiting_for_players"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class Room:
    """One two-player game.

    Seats are keyed by symbol: whoever sits in the X seat plays X. The first
    player to join an empty room takes X, the next one O. Callers that need
    several operations to appear atomic hold ``lock`` around them.
    """

    def __init__(self, room_id: str):
        self.room_id = room_id
        self.board = Board.empty()
        self.seats: Dict[Symbol, Optional[str]] = {symbol: None for symbol in SEAT_ORDER}
        # Join order; the seat map decides symbols
        self.players: List[str] = []
        self.turn = Symbol.X
        self.winner: Optional[Symbol] = None
        self.winner_line: Optional[Tuple[int, int, int]] = None
        self.status = RoomStatus.WAITING_FOR_PLAYERS
        self.disconnected = False
        self.created_at = datetime.now().isoformat()
        self.lock = threading.RLock()

    @property
    def is_full(self) -> bool:
        return len(self.players) >= 2

    def symbol_of(self, player_id: str) -> Optional[Symbol]:
        for symbol, player in self.seats.items():
            if player == player_id:
                return symbol
        return None

    def join(self, player_id: str) -> Symbol:
        with self.lock:
            existing = self.symbol_of(player_id)
            if existing is not None:
                return existing
            if self.is_full:
                raise RoomFull(f"Room {self.room_id} already has two players")

            symbol = next(s for s in SEAT_ORDER if self.seats[s] is None)
            self.seats[symbol] = player_id
            self.players.append(player_id)
            logger.info(f"Player {player_id} joined room {self.room_id} as {symbol.value}")

            if self.is_full and self.status is RoomStatus.WAITING_FOR_PLAYERS:
                self.status = RoomStatus.IN_PROGRESS
                logger.info(f"Room {self.room_id} is in progress, {self.turn.value} to move")
            return symbol

    def move(self, player_id: str, index: int) -> Outcome:
        with self.lock:
            if self.status is not RoomStatus.IN_PROGRESS:
                raise RoomNotInProgress(f"Room {self.room_id} is {self.status.value}")

            symbol = self.symbol_of(player_id)
            if symbol is None or symbol is not self.turn:
                raise NotYourTurn(f"It is {self.turn.value}'s turn in room {self.room_id}")

            self.board = apply_move(self.board, index, symbol)
            outcome = evaluate(self.board)

            if outcome.kind is OutcomeKind.WIN:
                self.status = RoomStatus.FINISHED
                self.winner = outcome.winner
                self.winner_line = outcome.line
                logger.info(f"Room {self.room_id} won by {symbol.value} on line {list(outcome.line)}")
            elif outcome.kind is OutcomeKind.DRAW:
                self.status = RoomStatus.FINISHED
                logger.info(f"Room {self.room_id} ended in a draw")
            else:
                self.turn = symbol.other
            return outcome

    def disconnect(self, player_id: str) -> bool:
        """Free ``player_id``'s seat.

        Returns True when the departure ended a game in progress.
        """
        with self.lock:
            symbol = self.symbol_of(player_id)
            if symbol is None:
                return False
            self.seats[symbol] = None
            self.players.remove(player_id)

            if self.status is RoomStatus.IN_PROGRESS:
                self.status = RoomStatus.FINISHED
                self.disconnected = True
                logger.info(f"Player {player_id} left room {self.room_id} mid-game, game finished")
                return True

            logger.info(f"Player {player_id} left room {self.room_id} ({self.status.value})")
            return False

    def reset(self, requester_id: str):
        # Any member may reset, including mid-game.
        with self.lock:
            if self.symbol_of(requester_id) is None:
                raise UnauthorizedSymbol(f"{requester_id} is not a member of room {self.room_id}")

            self.board = Board.empty()
            self.turn = Symbol.X
            self.winner = None
            self.winner_line = None
            self.disconnected = False
            self.status = RoomStatus.IN_PROGRESS if self.is_full else RoomStatus.WAITING_FOR_PLAYERS
            logger.info(f"Room {self.room_id} reset by {requester_id}, now {self.status.value}")

    def snapshot(self) -> dict:
        with self.lock:
            state = {
                "board": self.board.to_list(),
                "players": list(self.players),
                "turn": self.turn.value,
                "status": self.status.value,
            }
            if self.winner_line is not None:
                state["winnerLine"] = list(self.winner_line)
            return state
