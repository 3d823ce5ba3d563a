from __future__ import annotations

from urllib.parse import quote

from flask import Blueprint, current_app, jsonify, request
from flask.views import MethodView
from loguru import logger

from ..policies import reset_allowed, reset_gate_enabled
from ..services.exchange import Exchange, MemberError, UnknownGiver, WrongSecret
from ..storage import StorageError


api_bp = Blueprint("api", __name__, url_prefix="/api")


def get_exchange() -> Exchange:
    return current_app.extensions["santagate"]


def _error(message: str, status: int):
    return jsonify({"error": message}), status


class ListView(MethodView):
    def get(self):
        result_path = current_app.config["SANTA_RESULT_PATH"]
        entries = [
            {"name": giver, "link": f"{result_path}?giver={quote(giver, safe='')}"}
            for giver in get_exchange().givers()
        ]
        return jsonify(entries)


class ResultView(MethodView):
    def post(self):
        giver = request.args.get("giver", "")
        if not giver:
            return _error("The giver query parameter is required.", 400)
        if not get_exchange().has_giver(giver):
            return _error("Participant not found.", 404)

        data = request.get_json(silent=True)
        password = data.get("password") if isinstance(data, dict) else None
        if not isinstance(password, str) or not password:
            return _error("A password is required.", 400)

        try:
            receiver = get_exchange().reveal(giver, password)
        except UnknownGiver:
            return _error("Participant not found.", 404)
        except WrongSecret:
            return _error("Wrong password.", 403)
        return jsonify({"receiver": receiver})


class AddView(MethodView):
    def post(self):
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            return _error("Body must be a JSON object with a name.", 400)

        try:
            state = get_exchange().add_member(data["name"])
        except MemberError as e:
            return _error(str(e), 400)
        return jsonify({"name": state.members[-1], "members": len(state.members)})


class ResetView(MethodView):
    def post(self):
        if reset_gate_enabled():
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return _error("Body must be a JSON object with a password.", 400)
            if not reset_allowed(data.get("password")):
                logger.warning("Rejected reset with wrong password")
                return _error("Wrong password.", 403)

        get_exchange().reset()
        return jsonify({"status": "reset"})


@api_bp.errorhandler(StorageError)
def storage_failed(e: StorageError):
    logger.opt(exception=e).error("Persisting exchange state failed")
    return _error("Could not save the exchange state.", 500)


api_bp.add_url_rule("/list", view_func=ListView.as_view("list"), methods=["GET"])
api_bp.add_url_rule("/result", view_func=ResultView.as_view("result"), methods=["POST"])
api_bp.add_url_rule("/add", view_func=AddView.as_view("add"), methods=["POST"])
api_bp.add_url_rule("/reset", view_func=ResetView.as_view("reset"), methods=["POST"])
