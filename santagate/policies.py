from __future__ import annotations

from flask import current_app

from .security import reset_password_matches


def reset_gate_enabled() -> bool:
    return bool(current_app.config.get("SANTA_RESET_PASSWORD"))


def reset_allowed(submitted) -> bool:
    expected = current_app.config.get("SANTA_RESET_PASSWORD") or ""
    if not expected:
        return True
    if not isinstance(submitted, str):
        return False
    return reset_password_matches(submitted, expected)
