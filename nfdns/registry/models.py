"""Registry data models — collection descriptor and token records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union

TokenId = Union[int, str]


@dataclass(frozen=True)
class Collection:
    """Fixed properties of a registry, set once at creation."""

    name: str
    symbol: str
    minting_authority: str  # The only identity allowed to mint


@dataclass(frozen=True)
class TokenRecord:
    """A single minted token."""

    token_id: TokenId
    owner: str
    uri: str = ""
    minted_at: str = ""  # ISO 8601

    def __post_init__(self) -> None:
        if not self.minted_at:
            object.__setattr__(self, "minted_at", datetime.now(timezone.utc).isoformat())


def parse_token_id(raw: str) -> TokenId:
    """Interpret a textual identifier: all-digit strings become integers."""
    text = raw.strip()
    if text.isascii() and text.isdigit():
        return int(text)
    return text


def collection_to_dict(collection: Collection) -> dict:
    return {
        "name": collection.name,
        "symbol": collection.symbol,
        "minting_authority": collection.minting_authority,
    }


def collection_from_dict(data: dict) -> Collection:
    return Collection(
        name=data["name"],
        symbol=data["symbol"],
        minting_authority=data["minting_authority"],
    )


def record_to_dict(record: TokenRecord) -> dict:
    return {
        "token_id": record.token_id,
        "owner": record.owner,
        "uri": record.uri,
        "minted_at": record.minted_at,
    }


def record_from_dict(data: dict) -> TokenRecord:
    token_id = data["token_id"]
    if not isinstance(token_id, (int, str)) or isinstance(token_id, bool):
        raise ValueError(f"Invalid token identifier: {token_id!r}")
    return TokenRecord(
        token_id=token_id,
        owner=data["owner"],
        uri=data.get("uri", ""),
        minted_at=data.get("minted_at", ""),
    )
