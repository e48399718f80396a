"""Session management: fixed session table, joining, moves, and leaving."""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass, field
from typing import Iterable

from checkers_server.board import Color, Square
from checkers_server.game import GameState
from checkers_server.gateway import ConnectionGateway
from checkers_server.models import (
    AssignedMsg,
    MoveAppliedMsg,
    OpponentLeftMsg,
    RejectedMsg,
    SquareModel,
    StartedMsg,
    StateSyncMsg,
)
from checkers_server.rules import Rejected

logger = logging.getLogger(__name__)

MAX_PLAYERS = 2

INVALID_CODE = "Invalid code"
ROOM_FULL = "Room full"
NOT_IN_ROOM = "Not in this room"
COLOR_MISMATCH = "Color mismatch"
GAME_NOT_STARTED = "Game not started"


def generate_codes(count: int) -> list[str]:
    codes: set[str] = set()
    while len(codes) < count:
        codes.add(secrets.token_hex(3))  # 6-char hex
    return sorted(codes)


@dataclass
class Player:
    connection_id: str
    color: Color


@dataclass
class Session:
    code: str
    players: list[Player] = field(default_factory=list)
    game: GameState = field(default_factory=GameState)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def in_progress(self) -> bool:
        return len(self.players) == MAX_PLAYERS

    @property
    def connection_ids(self) -> list[str]:
        return [p.connection_id for p in self.players]

    def get_player(self, connection_id: str) -> Player | None:
        for p in self.players:
            if p.connection_id == connection_id:
                return p
        return None

    def next_color(self) -> Color:
        taken = {p.color for p in self.players}
        return Color.RED if Color.RED not in taken else Color.BLACK

    def state_sync(self) -> StateSyncMsg:
        game = self.game
        return StateSyncMsg(
            code=self.code,
            board=game.board.to_rows(),
            turn=game.turn.value,
            must_continue=game.must_continue,
            continue_from=SquareModel.from_square(game.continue_from),
            players=[p.color.value for p in self.players],
        )


class SessionRegistry:
    """Owns every session for the life of the process.

    Sessions are created once, up front. Only their seats, boards and turns
    change afterward.
    """

    def __init__(self, codes: Iterable[str], gateway: ConnectionGateway | None = None):
        self.gateway = gateway or ConnectionGateway()
        self.sessions: dict[str, Session] = {code: Session(code=code) for code in codes}

    @classmethod
    def with_generated_codes(cls, count: int, gateway: ConnectionGateway | None = None) -> SessionRegistry:
        return cls(generate_codes(count), gateway)

    def get(self, code: str) -> Session | None:
        return self.sessions.get(code)

    async def _reject(self, connection_id: str, reason: str) -> None:
        logger.debug("Rejected %s: %s", connection_id, reason)
        await self.gateway.send(connection_id, RejectedMsg(reason=reason))

    async def join(self, code: str, connection_id: str) -> Player | None:
        session = self.sessions.get(code)
        if session is None:
            await self._reject(connection_id, INVALID_CODE)
            return None

        async with session.lock:
            player = session.get_player(connection_id)
            started = False
            if player is None:
                if len(session.players) >= MAX_PLAYERS:
                    await self._reject(connection_id, ROOM_FULL)
                    return None
                player = Player(connection_id=connection_id, color=session.next_color())
                session.players.append(player)
                logger.info("Connection %s joined %s as %s", connection_id, code, player.color.value)
                if session.in_progress:
                    session.game.start()
                    started = True

            await self.gateway.send(connection_id, AssignedMsg(color=player.color.value, code=code))
            await self.gateway.send(connection_id, session.state_sync())

            if started:
                logger.info("Session %s started", code)
                await self.gateway.broadcast(
                    session.connection_ids, StartedMsg(first_turn=session.game.turn.value)
                )
            return player

    async def move(
        self,
        code: str,
        connection_id: str,
        src: Square,
        dst: Square,
        color: Color | None = None,
    ) -> None:
        session = self.sessions.get(code)
        if session is None:
            logger.debug("Move for unknown session %s ignored", code)
            return

        async with session.lock:
            player = session.get_player(connection_id)
            if player is None:
                await self._reject(connection_id, NOT_IN_ROOM)
                return
            if color is not None and color is not player.color:
                await self._reject(connection_id, COLOR_MISMATCH)
                return
            if not session.in_progress:
                await self._reject(connection_id, GAME_NOT_STARTED)
                return

            result = session.game.make_move(player.color, src, dst)
            if isinstance(result, Rejected):
                await self._reject(connection_id, result.reason)
                return

            logger.info(
                "%s %s moved %s -> %s%s",
                code,
                player.color.value,
                tuple(src),
                tuple(dst),
                " (capture)" if result.captured_square else "",
            )
            await self.gateway.broadcast(
                session.connection_ids,
                MoveAppliedMsg(
                    code=code,
                    color=player.color.value,
                    from_=SquareModel.from_square(result.from_square),
                    to=SquareModel.from_square(result.to_square),
                    captured_square=SquareModel.from_square(result.captured_square),
                    promoted=result.promoted,
                    must_continue=result.must_continue,
                    continue_from=SquareModel.from_square(result.continue_from),
                    next_turn=result.next_turn.value,
                ),
            )

    async def sync(self, code: str, connection_id: str) -> None:
        session = self.sessions.get(code)
        if session is None:
            await self._reject(connection_id, INVALID_CODE)
            return
        async with session.lock:
            if session.get_player(connection_id) is None:
                await self._reject(connection_id, NOT_IN_ROOM)
                return
            await self.gateway.send(connection_id, session.state_sync())

    async def disconnect(self, connection_id: str) -> None:
        """Drop every seat held by the connection. Boards and turns are kept."""
        for session in self.sessions.values():
            async with session.lock:
                player = session.get_player(connection_id)
                if player is None:
                    continue
                session.players.remove(player)
                logger.info("Connection %s left %s (%s)", connection_id, session.code, player.color.value)
                await self.gateway.broadcast(
                    session.connection_ids, OpponentLeftMsg(color=player.color.value)
                )

    def directory(self) -> list[dict]:
        return [
            {"code": s.code, "players": len(s.players), "in_progress": s.in_progress}
            for s in self.sessions.values()
        ]
