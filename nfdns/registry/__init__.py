"""Registry — ownership and transfer layer for NFDNS tokens.

The registry provides:
- Minting: one-time creation of a token by the collection's minting authority
- Ownership: every minted token has exactly one current owner
- Transfer: owner reassignment authorized only by the current owner
- Persistence: optional JSON index in a local directory
"""

from nfdns.registry.errors import (
    DuplicateIdentifierError,
    NotOwnerError,
    RegistryError,
    RegistryStoreError,
    UnauthorizedError,
    UnknownTokenError,
)
from nfdns.registry.local_store import LocalTokenStore
from nfdns.registry.models import Collection, TokenRecord
from nfdns.registry.token_registry import TokenRegistry

__all__ = [
    "Collection",
    "DuplicateIdentifierError",
    "LocalTokenStore",
    "NotOwnerError",
    "RegistryError",
    "RegistryStoreError",
    "TokenRecord",
    "TokenRegistry",
    "UnauthorizedError",
    "UnknownTokenError",
]
