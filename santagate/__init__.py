from __future__ import annotations

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import Settings, load_settings
from .services.exchange import Exchange
from .storage import StateStore, build_store
from .views.api import api_bp
from .views.public import public_bp


def create_app(settings: Settings | None = None, store: StateStore | None = None, rng=None) -> Flask:
    settings = settings or load_settings()

    app = Flask(__name__, static_folder=None)
    app.config["SANTA_RESET_PASSWORD"] = settings.reset_password
    app.config["SANTA_RESULT_PATH"] = settings.result_path
    app.config["SANTA_FRONTEND_DIR"] = settings.frontend_dir
    app.json.sort_keys = False

    if store is None:
        store = build_store(settings, app)

    with app.app_context():
        exchange = Exchange.open(store, rng=rng, reshuffle=settings.reshuffle_on_start)
    app.extensions["santagate"] = exchange

    # Blueprints
    app.register_blueprint(api_bp)
    app.register_blueprint(public_bp)

    @app.errorhandler(HTTPException)
    def api_http_error(e: HTTPException):
        if request.path.startswith("/api/"):
            headers = [(k, v) for k, v in e.get_headers() if k.lower() != "content-type"]
            return jsonify({"error": e.description}), e.code, headers
        return e

    return app
