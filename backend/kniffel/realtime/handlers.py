from __future__ import annotations

import logging

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room

from ..game.errors import GameError, NotAuthorized, RoomNotFound
from ..game.service import GameService
from . import events


logger = logging.getLogger(__name__)


def register_socketio_handlers(socketio: SocketIO, service: GameService) -> None:
    def _reject(exc: GameError) -> dict:
        logger.debug("[reject] sid=%s error=%s message=%s", request.sid, exc.kind, exc.message)
        payload = exc.to_dict()
        emit("room:error", payload, to=request.sid)
        return {"ok": False, **payload}

    def _seat(room) -> None:
        join_room(room.code)

    def _leave_current(sid: str) -> None:
        code = service.leave(sid)
        if code:
            leave_room(code)

    @socketio.on("room:create")
    def room_create(data):
        try:
            req = events.parse(events.CreateRoom, data)
            _leave_current(request.sid)
            snapshot = service.create_room(request.sid, req.name, on_seated=_seat)
        except GameError as exc:
            return _reject(exc)

        code = snapshot["roomCode"]
        emit("room:joined", {"roomCode": code, "playerId": request.sid}, to=request.sid)
        return {"ok": True, "roomCode": code, "playerId": request.sid}

    @socketio.on("room:join")
    def room_join(data):
        try:
            req = events.parse(events.JoinRoom, data)
            # vet the target first so a failed join keeps the caller seated
            service.check_joinable(req.room_code, request.sid)
            _leave_current(request.sid)
            snapshot = service.join_room(req.room_code, request.sid, req.name, on_seated=_seat)
        except GameError as exc:
            return _reject(exc)

        code = snapshot["roomCode"]
        emit("room:joined", {"roomCode": code, "playerId": request.sid}, to=request.sid)
        return {"ok": True, "roomCode": code, "playerId": request.sid}

    @socketio.on("room:add_ai")
    def room_add_ai(data):
        try:
            req = events.parse(events.AddAutomatedPlayer, data)
            service.add_ai_player(req.room_code, request.sid, req.difficulty)
        except GameError as exc:
            return _reject(exc)
        return {"ok": True}

    @socketio.on("room:leave")
    def room_leave(data):
        try:
            req = events.parse(events.RoomAction, data)
        except GameError as exc:
            return _reject(exc)

        code = service.leave(request.sid, req.room_code)
        leave_room(req.room_code)
        return {"ok": code is not None}

    @socketio.on("game:start")
    def game_start(data):
        try:
            req = events.parse(events.RoomAction, data)
            service.start_game(req.room_code, request.sid)
        except GameError as exc:
            return _reject(exc)
        return {"ok": True}

    @socketio.on("game:roll")
    def game_roll(data):
        try:
            req = events.parse(events.RollDice, data)
            snapshot = service.roll(req.room_code, request.sid, list(req.kept_mask))
        except GameError as exc:
            return _reject(exc)
        return {"ok": True, "dice": snapshot["dice"], "rollsLeft": snapshot["rollsLeft"]}

    @socketio.on("game:score")
    def game_score(data):
        try:
            req = events.parse(events.SubmitScore, data)
            service.submit_score(req.room_code, request.sid, req.category)
        except GameError as exc:
            return _reject(exc)
        return {"ok": True}

    @socketio.on("game:restart")
    def game_restart(data):
        try:
            req = events.parse(events.RoomAction, data)
            service.restart_game(req.room_code, request.sid)
        except GameError as exc:
            return _reject(exc)
        return {"ok": True}

    @socketio.on("chat:message")
    def chat_message(data):
        try:
            req = events.parse(events.ChatMessage, data)
            room = service.get_room(req.room_code)
            player = room.get_player(request.sid) if room else None
            if player is None:
                raise NotAuthorized("You are not in this room") if room else RoomNotFound()
        except GameError as exc:
            return _reject(exc)

        socketio.emit(
            "chat:message",
            {"roomCode": req.room_code, "from": request.sid, "name": player.name, "text": req.text},
            to=req.room_code,
        )
        return {"ok": True}

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        code = service.leave(request.sid)
        if code:
            logger.info("[disconnect] sid=%s room=%s reason=%s", request.sid, code, reason)
