from __future__ import annotations

from pathlib import Path

from flask import Blueprint, current_app, send_from_directory
from flask.views import MethodView


public_bp = Blueprint("public", __name__)

# Flat filenames only, so /api/* paths never fall through to this blueprint.

BUNDLED_FRONTEND = Path(__file__).resolve().parent.parent / "static"


def frontend_dir() -> Path:
    configured = current_app.config.get("SANTA_FRONTEND_DIR")
    return Path(configured) if configured else BUNDLED_FRONTEND


class FrontendView(MethodView):
    def get(self, filename: str = "index.html"):
        return send_from_directory(frontend_dir(), filename)


public_bp.add_url_rule("/", view_func=FrontendView.as_view("landing"))
public_bp.add_url_rule("/<string:filename>", view_func=FrontendView.as_view("asset"))
