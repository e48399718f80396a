"""Pydantic models for WebSocket message protocol."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from checkers_server.board import Square

ColorName = Literal["red", "black"]


class SquareModel(BaseModel):
    r: int
    c: int

    def to_square(self) -> Square:
        return Square(self.r, self.c)

    @classmethod
    def from_square(cls, square: Square | None) -> SquareModel | None:
        if square is None:
            return None
        return cls(r=square.row, c=square.col)


# ---------------------------------------------------------------------------
# Client → Server
# ---------------------------------------------------------------------------

class JoinMsg(BaseModel):
    type: Literal["join"] = "join"
    code: str


class MoveMsg(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["move"] = "move"
    code: str
    color: ColorName | None = None
    from_: SquareModel = Field(alias="from")
    to: SquareModel


class LeaveMsg(BaseModel):
    type: Literal["leave"] = "leave"


class SyncMsg(BaseModel):
    type: Literal["sync"] = "sync"
    code: str


ClientMessage = JoinMsg | MoveMsg | LeaveMsg | SyncMsg


# ---------------------------------------------------------------------------
# Server → Client
# ---------------------------------------------------------------------------

class ServerMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def dump(self) -> dict:
        return self.model_dump(by_alias=True)


class AssignedMsg(ServerMessage):
    type: Literal["assigned"] = "assigned"
    color: ColorName
    code: str


class StartedMsg(ServerMessage):
    type: Literal["started"] = "started"
    first_turn: ColorName


class RejectedMsg(ServerMessage):
    type: Literal["rejected"] = "rejected"
    reason: str


class MoveAppliedMsg(ServerMessage):
    type: Literal["move_applied"] = "move_applied"
    code: str
    color: ColorName
    from_: SquareModel = Field(alias="from")
    to: SquareModel
    captured_square: SquareModel | None
    promoted: bool
    must_continue: bool
    continue_from: SquareModel | None
    next_turn: ColorName


class PieceModel(BaseModel):
    color: ColorName
    king: bool


class StateSyncMsg(ServerMessage):
    type: Literal["state_sync"] = "state_sync"
    code: str
    board: list[list[PieceModel | None]]
    turn: ColorName
    must_continue: bool
    continue_from: SquareModel | None
    players: list[ColorName]


class OpponentLeftMsg(ServerMessage):
    type: Literal["opponent_left"] = "opponent_left"
    color: ColorName


class ErrorMsg(ServerMessage):
    type: Literal["error"] = "error"
    message: str


def parse_client_message(data: object) -> ClientMessage | None:
    """Parse a raw dict into a typed client message, or None if invalid."""
    if not isinstance(data, dict):
        return None
    msg_type = data.get("type")
    if not isinstance(msg_type, str):
        return None
    mapping: dict[str, type[BaseModel]] = {
        "join": JoinMsg,
        "move": MoveMsg,
        "leave": LeaveMsg,
        "sync": SyncMsg,
    }
    model = mapping.get(msg_type)
    if model is None:
        return None
    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except ValidationError:
        return None
