from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .extensions import db


@dataclass
class Pair:
    giver: str
    receiver: str
    # passlib hash of the giver's self-chosen password, set on first reveal
    password_hash: str | None = None
    has_access: bool = False

    def to_dict(self) -> dict:
        data = {"giver": self.giver, "receiver": self.receiver}
        if self.password_hash:
            data["password_hash"] = self.password_hash
        data["has_access"] = self.has_access
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Pair:
        if not isinstance(data, dict):
            raise ValueError("pair must be an object")
        giver = data.get("giver")
        receiver = data.get("receiver")
        if not isinstance(giver, str) or not isinstance(receiver, str):
            raise ValueError("pair giver and receiver must be strings")
        # Older documents stored the hash under "password".
        password_hash = data.get("password_hash") or data.get("password") or None
        if password_hash is not None and not isinstance(password_hash, str):
            raise ValueError("pair password hash must be a string")
        return cls(
            giver=giver,
            receiver=receiver,
            password_hash=password_hash,
            has_access=bool(data.get("has_access", False)),
        )


@dataclass
class ExchangeState:
    """Members of the current round plus their giver -> receiver pairs."""

    members: list[str] = field(default_factory=list)
    pairs: list[Pair] = field(default_factory=list)

    def find_pair(self, giver: str) -> Pair | None:
        for pair in self.pairs:
            if pair.giver == giver:
                return pair
        return None

    def to_dict(self) -> dict:
        return {
            "members": list(self.members),
            "pairs": [p.to_dict() for p in self.pairs],
        }

    @classmethod
    def from_dict(cls, data: dict) -> ExchangeState:
        if not isinstance(data, dict):
            raise ValueError("state document must be an object")
        members = data.get("members") or []
        pairs = data.get("pairs") or []
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise ValueError("members must be a list of strings")
        if not isinstance(pairs, list):
            raise ValueError("pairs must be a list")
        return cls(members=list(members), pairs=[Pair.from_dict(p) for p in pairs])


class StoredState(db.Model):
    """Single-row table holding the JSON state document (sql backend)."""

    __tablename__ = "exchange_state"

    id = db.Column(db.Integer, primary_key=True)
    document = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @classmethod
    def get_singleton(cls):
        return cls.query.order_by(cls.id.asc()).first()
