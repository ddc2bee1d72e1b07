from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from board import Symbol
from exceptions import GameError, RoomFull, UnauthorizedSymbol
from logging_config import get_logger
from registry import RoomRegistry
from room import Room, RoomStatus
from schemas.messages import Full, GameOver, JoinIntent, Joined, OutboundMessage, PlayIntent, ResetIntent, State

logger = get_logger(__name__)


@dataclass
class Session:
    """Binding between one live connection and at most one (room, symbol) pair."""

    connection_id: str
    room_id: Optional[str] = None
    symbol: Optional[Symbol] = None

    @property
    def is_bound(self) -> bool:
        return self.room_id is not None

    def is_bound_to(self, room_id: str) -> bool:
        return self.room_id is not None and self.room_id == room_id


@dataclass(frozen=True)
class Envelope:
    recipients: Tuple[str, ...]
    message: OutboundMessage


def _to(recipients: Sequence[str], message: OutboundMessage) -> Envelope:
    return Envelope(tuple(recipients), message)


class SessionGateway:
    """Turns validated intents into room operations and addressed outbound messages.

    Every intent for a room is handled while holding that room's lock, so the
    room change and the envelopes describing it are produced together. The
    caller is only responsible for delivering the envelopes in order.
    """

    def __init__(self, registry: RoomRegistry):
        self.registry = registry
        self._sessions: Dict[str, Session] = {}
        self._handlers: Dict[str, Callable[[Session, object], List[Envelope]]] = {
            "join": self._handle_join,
            "play": self._handle_play,
            "reset": self._handle_reset,
        }

    def connect(self, connection_id: str) -> Session:
        session = Session(connection_id)
        self._sessions[connection_id] = session
        logger.debug(f"Session opened for connection {connection_id}")
        return session

    def session(self, connection_id: str) -> Optional[Session]:
        return self._sessions.get(connection_id)

    def dispatch(self, session: Session, intent) -> List[Envelope]:
        handler = self._handlers.get(intent.type)
        if handler is None:
            logger.warning(f"No handler for intent type {intent.type!r} from {session.connection_id}")
            return []
        try:
            return handler(session, intent)
        except GameError as e:
            logger.debug(f"Dropped {intent.type} intent from {session.connection_id}: {type(e).__name__}: {e}")
            return []

    def disconnect(self, session: Session) -> List[Envelope]:
        self._sessions.pop(session.connection_id, None)
        if not session.is_bound:
            logger.debug(f"Unbound connection {session.connection_id} closed")
            return []

        room = self.registry.get_or_create(session.room_id)
        with room.lock:
            ended_game = room.disconnect(session.connection_id)
            session.room_id = None
            session.symbol = None

            remaining = room.players
            if not remaining:
                return []
            if ended_game:
                return [_to(remaining, GameOver(winner=None, disconnected=True))]
            return [self._state_for(room)]

    def _handle_join(self, session: Session, intent: JoinIntent) -> List[Envelope]:
        if session.is_bound:
            logger.debug(
                f"Connection {session.connection_id} already in room {session.room_id}, "
                f"ignoring join to {intent.room_id}"
            )
            return []

        room = self.registry.get_or_create(intent.room_id)
        with room.lock:
            try:
                symbol = room.join(session.connection_id)
            except RoomFull:
                logger.info(f"Connection {session.connection_id} rejected from full room {intent.room_id}")
                return [_to([session.connection_id], Full())]

            session.room_id = room.room_id
            session.symbol = symbol
            envelopes = [
                _to([session.connection_id], Joined(symbol=symbol)),
                self._state_for(room),
            ]
            if room.status is RoomStatus.FINISHED:
                # Seat freed by a mid-game leave; nothing is playable until a reset
                envelopes.append(_to(room.players, GameOver(winner=room.winner, disconnected=room.disconnected)))
            return envelopes

    def _handle_play(self, session: Session, intent: PlayIntent) -> List[Envelope]:
        if not session.is_bound_to(intent.room_id):
            logger.debug(f"Connection {session.connection_id} is not in room {intent.room_id}, ignoring play")
            return []
        if intent.symbol is not session.symbol:
            raise UnauthorizedSymbol(
                f"Connection {session.connection_id} claimed {intent.symbol.value} "
                f"but was granted {session.symbol.value}"
            )

        room = self.registry.get_or_create(intent.room_id)
        with room.lock:
            outcome = room.move(session.connection_id, intent.index)
            envelopes = [self._state_for(room)]
            if outcome.is_terminal:
                envelopes.append(_to(room.players, GameOver(winner=outcome.winner, disconnected=False)))
            return envelopes

    def _handle_reset(self, session: Session, intent: ResetIntent) -> List[Envelope]:
        if not session.is_bound_to(intent.room_id):
            logger.debug(f"Connection {session.connection_id} is not in room {intent.room_id}, ignoring reset")
            return []

        room = self.registry.get_or_create(intent.room_id)
        with room.lock:
            room.reset(session.connection_id)
            return [self._state_for(room)]

    @staticmethod
    def _state_for(room: Room) -> Envelope:
        return _to(room.players, State.from_snapshot(room.snapshot()))
