"""Registry exception types.

Each failure kind is its own class so callers can tell "token doesn't
exist" from "wrong owner" from "not allowed" without inspecting messages.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for token registry failures."""

    code = "registry_error"


class DuplicateIdentifierError(RegistryError):
    """Raised when minting an identifier that has already been minted."""

    code = "duplicate_identifier"


class UnauthorizedError(RegistryError):
    """Raised when the caller lacks the privilege an operation requires."""

    code = "unauthorized"


class UnknownTokenError(RegistryError, KeyError):
    """Raised when an operation references a never-minted identifier."""

    code = "unknown_token"

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class NotOwnerError(RegistryError):
    """Raised when a transfer's declared sender is not the recorded owner."""

    code = "not_owner"


class RegistryStoreError(RegistryError):
    """Raised when the on-disk registry index cannot be read or written."""

    code = "store_error"


__all__ = [
    "RegistryError",
    "DuplicateIdentifierError",
    "UnauthorizedError",
    "UnknownTokenError",
    "NotOwnerError",
    "RegistryStoreError",
]
