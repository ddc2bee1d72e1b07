import json
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, ValidationError

from board import Symbol
from constants import MAX_ROOM_ID_LENGTH
from exceptions import InvalidIntent

RoomId = Annotated[str, Field(alias="roomId", min_length=1, max_length=MAX_ROOM_ID_LENGTH)]


# Inbound (client -> server)

class _Intent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")


class JoinIntent(_Intent):
    type: Literal["join"] = "join"
    room_id: RoomId


class PlayIntent(_Intent):
    type: Literal["play"] = "play"
    room_id: RoomId
    index: StrictInt
    symbol: Symbol


class ResetIntent(_Intent):
    type: Literal["reset"] = "reset"
    room_id: RoomId


Intent = Annotated[Union[JoinIntent, PlayIntent, ResetIntent], Field(discriminator="type")]

_intent_adapter = TypeAdapter(Intent)


def parse_intent(raw: Union[str, bytes, dict]) -> Union[JoinIntent, PlayIntent, ResetIntent]:
    """Validate an inbound frame into one of the closed intent types.

    Raises InvalidIntent for malformed JSON, an unknown ``type`` or bad fields.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidIntent(f"Frame is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise InvalidIntent(f"Frame must be a JSON object, got {type(raw).__name__}")
    try:
        return _intent_adapter.validate_python(raw)
    except ValidationError as e:
        raise InvalidIntent(f"Invalid {raw.get('type', 'unknown')!r} intent: {e.error_count()} error(s)") from e


# Outbound (server -> client)

class OutboundMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Joined(OutboundMessage):
    type: Literal["joined"] = "joined"
    symbol: Symbol


class Full(OutboundMessage):
    type: Literal["full"] = "full"


class State(OutboundMessage):
    type: Literal["state"] = "state"
    board: List[Optional[Symbol]]
    players: List[str]
    turn: Symbol
    winner_line: Optional[List[int]] = Field(default=None, alias="winnerLine")

    @classmethod
    def from_snapshot(cls, snapshot: dict) -> "State":
        return cls(
            board=snapshot["board"],
            players=snapshot["players"],
            turn=snapshot["turn"],
            winner_line=snapshot.get("winnerLine"),
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        if data["winnerLine"] is None:
            del data["winnerLine"]
        return data


class GameOver(OutboundMessage):
    type: Literal["gameOver"] = "gameOver"
    winner: Optional[Symbol] = None
    disconnected: bool = False
