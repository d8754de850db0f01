"""Token registry — mint, ownership and transfer rules.

All reads and writes go through a single lock, so mutations are totally
ordered and a failed call never leaves a partial update behind. When a
store is attached, each mutation is persisted before the call returns and
rolled back in memory if the write fails.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from threading import Lock
from typing import Optional

from nfdns.registry.errors import (
    DuplicateIdentifierError,
    NotOwnerError,
    RegistryError,
    RegistryStoreError,
    UnauthorizedError,
    UnknownTokenError,
)
from nfdns.registry.local_store import LocalTokenStore
from nfdns.registry.models import Collection, TokenId, TokenRecord

logger = logging.getLogger(__name__)


class TokenRegistry:
    """Registry of unique tokens owned by opaque identities."""

    def __init__(
        self,
        collection: Collection,
        *,
        store: Optional[LocalTokenStore] = None,
        records: Optional[list[TokenRecord]] = None,
    ) -> None:
        self._collection = collection
        self._store = store
        self._tokens: dict[tuple[type, TokenId], TokenRecord] = {}
        self._lock = Lock()
        for record in records or []:
            if _key(record.token_id) in self._tokens:
                raise RegistryStoreError(f"Token {record.token_id!r} appears twice in stored records")
            self._tokens[_key(record.token_id)] = record

    @classmethod
    def open(cls, store: LocalTokenStore) -> TokenRegistry:
        """Load a registry previously persisted to ``store``."""
        loaded = store.load()
        if loaded is None:
            raise RegistryStoreError(f"No registry found at {store.registry_dir}")
        collection, records = loaded
        return cls(collection, store=store, records=records)

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    @property
    def collection(self) -> Collection:
        return self._collection

    @property
    def name(self) -> str:
        return self._collection.name

    @property
    def symbol(self) -> str:
        return self._collection.symbol

    @property
    def minting_authority(self) -> str:
        return self._collection.minting_authority

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def exists(self, token_id: TokenId) -> bool:
        with self._lock:
            return _key(token_id) in self._tokens

    def owner_of(self, token_id: TokenId) -> str:
        with self._lock:
            return self._require(token_id).owner

    def token_uri(self, token_id: TokenId) -> str:
        with self._lock:
            return self._require(token_id).uri

    def total_supply(self) -> int:
        with self._lock:
            return len(self._tokens)

    def tokens(self) -> list[TokenRecord]:
        """Return a snapshot of all records in mint order."""
        with self._lock:
            return list(self._tokens.values())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mint(self, token_id: TokenId, owner: str, uri: str, caller: str) -> TokenRecord:
        """Create ``token_id`` owned by ``owner``.

        Raises ``DuplicateIdentifierError`` if the identifier was already
        minted (whoever asks), then ``UnauthorizedError`` if ``caller`` is
        not the minting authority, then ``ValueError`` for an empty
        ``owner``.
        """
        key = _key(token_id)
        with self._lock:
            try:
                if key in self._tokens:
                    raise DuplicateIdentifierError(f"Token {token_id!r} already minted")
                if caller != self._collection.minting_authority:
                    raise UnauthorizedError(f"{caller!r} is not the minting authority")
            except RegistryError as exc:
                _log_rejection("mint", token_id, caller, exc)
                raise
            if not owner:
                raise ValueError("Owner must be a non-empty identity")

            record = TokenRecord(token_id=token_id, owner=owner, uri=uri)
            self._tokens[key] = record
            try:
                self._commit()
            except RegistryStoreError:
                del self._tokens[key]
                raise

        logger.info(
            "Minted token",
            extra={"data": {"token_id": token_id, "owner": owner, "caller": caller}},
        )
        return record

    def transfer(self, from_owner: str, to: str, token_id: TokenId, caller: str) -> TokenRecord:
        """Move ``token_id`` from ``from_owner`` to ``to``.

        Checks, in order: the token exists, ``from_owner`` is its recorded
        owner, ``caller`` is that owner, and ``to`` is a non-empty identity.
        """
        key = _key(token_id)
        with self._lock:
            try:
                current = self._require(token_id)
                if current.owner != from_owner:
                    raise NotOwnerError(f"{from_owner!r} does not own token {token_id!r}")
                if caller != current.owner:
                    raise UnauthorizedError(f"{caller!r} may not transfer token {token_id!r}")
            except RegistryError as exc:
                _log_rejection("transfer", token_id, caller, exc)
                raise
            if not to:
                raise ValueError("Recipient must be a non-empty identity")

            updated = replace(current, owner=to)
            self._tokens[key] = updated
            try:
                self._commit()
            except RegistryStoreError:
                self._tokens[key] = current
                raise

        logger.info(
            "Transferred token",
            extra={"data": {"token_id": token_id, "from": from_owner, "to": to}},
        )
        return updated

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require(self, token_id: TokenId) -> TokenRecord:
        record = self._tokens.get(_key(token_id))
        if record is None:
            raise UnknownTokenError(f"Token {token_id!r} has not been minted")
        return record

    def _commit(self) -> None:
        if self._store is not None:
            self._store.save(self._collection, list(self._tokens.values()))


def _key(token_id: TokenId) -> tuple[type, TokenId]:
    # 1 and "1" are different tokens; True must not alias 1
    if isinstance(token_id, bool) or not isinstance(token_id, (int, str)):
        raise TypeError(f"Token identifier must be int or str, got {type(token_id).__name__}")
    return (type(token_id), token_id)


def _log_rejection(operation: str, token_id: TokenId, caller: str, exc: RegistryError) -> None:
    logger.info(
        "Rejected %s",
        operation,
        extra={"data": {"token_id": token_id, "caller": caller, "error": exc.code}},
    )
