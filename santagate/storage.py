"""
Persistence for the exchange state.

Every backend stores the same JSON document:

    {"members": [...], "pairs": [{"giver", "receiver", "password_hash"?, "has_access"}]}

and raises StorageError for any failure, so callers only handle one type.
"""
from __future__ import annotations

import json
import os
from pathlib import Path

import redis
from flask import Flask
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings
from .extensions import db
from .models import ExchangeState, StoredState


class StorageError(RuntimeError):
    pass


def encode_state(state: ExchangeState) -> str:
    return json.dumps(state.to_dict(), ensure_ascii=False)


def decode_state(text: str | bytes | None) -> ExchangeState:
    if text is None:
        return ExchangeState()
    try:
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        if not text.strip():
            return ExchangeState()
        return ExchangeState.from_dict(json.loads(text))
    except ValueError as e:
        raise StorageError(f"Malformed state document: {e}") from e


class StateStore:
    name = "base"

    def load(self) -> ExchangeState:
        raise NotImplementedError

    def save(self, state: ExchangeState) -> None:
        raise NotImplementedError


class FileStateStore(StateStore):
    name = "file"

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def load(self) -> ExchangeState:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ExchangeState()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        return decode_state(text)

    def save(self, state: ExchangeState) -> None:
        temp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp.write_text(encode_state(state), encoding="utf-8")
            temp.replace(self.path)
        except OSError as e:
            temp.unlink(missing_ok=True)
            raise StorageError(f"Cannot write {self.path}: {e}") from e


class RedisStateStore(StateStore):
    name = "redis"

    def __init__(self, client, key: str):
        self.client = client
        self.key = key

    def load(self) -> ExchangeState:
        try:
            raw = self.client.get(self.key)
        except redis.RedisError as e:
            raise StorageError(f"Cannot read redis key {self.key}: {e}") from e
        return decode_state(raw)

    def save(self, state: ExchangeState) -> None:
        try:
            self.client.set(self.key, encode_state(state))
        except redis.RedisError as e:
            raise StorageError(f"Cannot write redis key {self.key}: {e}") from e


class SqlStateStore(StateStore):
    """Needs an application context with `db` bound."""

    name = "sql"

    def load(self) -> ExchangeState:
        try:
            row = StoredState.get_singleton()
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot read state row: {e}") from e
        return decode_state(row.document if row else None)

    def save(self, state: ExchangeState) -> None:
        try:
            row = StoredState.get_singleton()
            if row is None:
                row = StoredState(document=encode_state(state))
                db.session.add(row)
            else:
                row.document = encode_state(state)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(f"Cannot write state row: {e}") from e


def build_store(settings: Settings, app: Flask) -> StateStore:
    if settings.storage_backend == "file":
        return FileStateStore(settings.state_file)

    if settings.storage_backend == "redis":
        return RedisStateStore(redis.Redis.from_url(settings.redis_url), settings.redis_key)

    if settings.storage_backend == "sql":
        app.config["SQLALCHEMY_DATABASE_URI"] = settings.database_url
        app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
        db.init_app(app)
        with app.app_context():
            db.create_all()
        return SqlStateStore()

    raise ValueError(f"Unknown storage backend: {settings.storage_backend!r}")
