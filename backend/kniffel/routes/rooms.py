from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..game.errors import RoomNotFound

bp = Blueprint("rooms", __name__)


@bp.get("/rooms")
def list_rooms():
    service = current_app.extensions["kniffel"]
    rooms = [
        {
            "roomCode": r.code,
            "phase": r.phase.value,
            "players": len(r.players),
            "maxPlayers": r.max_players,
        }
        for r in service.registry.list()
    ]
    return jsonify({"rooms": rooms})


@bp.get("/rooms/<code>")
def get_room(code: str):
    service = current_app.extensions["kniffel"]
    try:
        return jsonify(service.snapshot(code))
    except RoomNotFound as exc:
        return jsonify(exc.to_dict()), 404
