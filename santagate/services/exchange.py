from __future__ import annotations

import threading
from dataclasses import replace

from loguru import logger

from ..models import ExchangeState, Pair
from ..security import hash_password, verify_password
from ..storage import StateStore, StorageError
from .assignments import draw_pairs, is_derangement


class ExchangeError(RuntimeError):
    pass


class MemberError(ExchangeError):
    """Rejected membership change (empty or duplicate name)."""


class GateError(ExchangeError):
    pass


class UnknownGiver(GateError):
    pass


class WrongSecret(GateError):
    pass


class Exchange:
    """
    The single gift-exchange round served by one process.

    All reads and writes go through one lock. Mutations build a new state,
    persist it, and only then replace the current one, so a failed save
    leaves memory and storage in agreement.
    """

    def __init__(self, store: StateStore, state: ExchangeState | None = None, rng=None):
        self.store = store
        self.rng = rng
        self._state = state or ExchangeState()
        self._lock = threading.Lock()

    @classmethod
    def open(cls, store: StateStore, rng=None, reshuffle: bool = False) -> Exchange:
        try:
            state = store.load()
        except StorageError:
            logger.exception("Could not load state from {backend} store, starting empty", backend=store.name)
            state = ExchangeState()

        exchange = cls(store, rng=rng)
        healed = exchange._heal(state, reshuffle)
        if healed is not state:
            try:
                store.save(healed)
            except StorageError:
                logger.exception("Could not persist redrawn pairs at startup")
        exchange._state = healed

        logger.info(
            "Exchange opened: backend={backend} members={members} redrawn={redrawn}",
            backend=store.name,
            members=len(healed.members),
            redrawn=healed is not state,
        )
        return exchange

    def _heal(self, state: ExchangeState, reshuffle: bool) -> ExchangeState:
        members = list(dict.fromkeys(state.members))
        if len(members) < 2:
            if state.pairs or members != state.members:
                return ExchangeState(members=members, pairs=[])
            return state
        if reshuffle or members != state.members or not is_derangement(members, state.pairs):
            return ExchangeState(members=members, pairs=draw_pairs(members, self.rng))
        return state

    def _commit(self, staged: ExchangeState) -> None:
        # Caller holds the lock.
        self.store.save(staged)
        self._state = staged

    def snapshot(self) -> ExchangeState:
        with self._lock:
            return ExchangeState(
                members=list(self._state.members),
                pairs=[replace(p) for p in self._state.pairs],
            )

    def givers(self) -> list[str]:
        with self._lock:
            return [p.giver for p in self._state.pairs]

    def has_giver(self, giver: str) -> bool:
        with self._lock:
            return self._state.find_pair(giver) is not None

    def add_member(self, name: str) -> ExchangeState:
        name = (name or "").strip()
        if not name:
            raise MemberError("Name must not be empty.")

        with self._lock:
            if name in self._state.members:
                raise MemberError(f"{name} is already taking part.")

            members = self._state.members + [name]
            staged = ExchangeState(members=members, pairs=draw_pairs(members, self.rng))
            self._commit(staged)

        logger.info("Added member {name}; {count} member(s), pairs redrawn", name=name, count=len(members))
        return staged

    def reset(self) -> None:
        with self._lock:
            self._commit(ExchangeState())
        logger.info("Exchange reset")

    def reveal(self, giver: str, password: str) -> str:
        """
        Return the giver's receiver.

        The first password submitted for a pair is stored (hashed) and every
        later reveal must match it.
        """
        with self._lock:
            pair = self._state.find_pair(giver)
            if pair is None:
                raise UnknownGiver(f"No pairing for {giver}.")

            if pair.password_hash:
                if not verify_password(password, pair.password_hash):
                    logger.warning("Wrong password for giver {giver}", giver=giver)
                    raise WrongSecret("Wrong password.")
                return pair.receiver

            claimed = Pair(
                giver=pair.giver,
                receiver=pair.receiver,
                password_hash=hash_password(password),
                has_access=True,
            )
            staged = ExchangeState(
                members=list(self._state.members),
                pairs=[claimed if p.giver == giver else p for p in self._state.pairs],
            )
            self._commit(staged)

        logger.info("Giver {giver} claimed their pairing", giver=giver)
        return claimed.receiver
