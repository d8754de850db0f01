"""Local file-based registry storage.

Stores the collection descriptor and every token record as one JSON index
in a local directory, so each commit replaces the whole state at once.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from nfdns.registry.errors import RegistryStoreError
from nfdns.registry.models import (
    Collection,
    TokenRecord,
    collection_from_dict,
    collection_to_dict,
    record_from_dict,
    record_to_dict,
)

logger = logging.getLogger(__name__)


class LocalTokenStore:
    """File-based storage for a single token registry.

    Storage path: ``<registry_dir>/index.json`` with:
    - ``collection`` -- name, symbol and minting authority
    - ``tokens`` -- list of token record dicts in mint order
    """

    INDEX_FILE = "index.json"

    def __init__(self, registry_dir: str | Path):
        self.registry_dir = Path(registry_dir)
        self.index_path = self.registry_dir / self.INDEX_FILE

    def exists(self) -> bool:
        return self.index_path.exists()

    def initialize(self, collection: Collection) -> None:
        """Create an empty index for ``collection``."""
        if self.exists():
            raise RegistryStoreError(f"Registry already initialized at {self.registry_dir}")
        self.registry_dir.mkdir(parents=True, exist_ok=True)
        self.save(collection, [])

    def load(self) -> Optional[tuple[Collection, list[TokenRecord]]]:
        """Read the index. Returns None when nothing has been stored yet."""
        if not self.exists():
            return None
        try:
            data = json.loads(self.index_path.read_text(encoding="utf-8"))
            collection = collection_from_dict(data["collection"])
            records = [record_from_dict(d) for d in data.get("tokens", [])]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise RegistryStoreError(f"Unreadable registry index {self.index_path}: {exc}") from exc

        logger.debug(
            "Loaded registry index",
            extra={"data": {"path": str(self.index_path), "tokens": len(records)}},
        )
        return collection, records

    def save(self, collection: Collection, records: list[TokenRecord]) -> None:
        """Replace the index with the given state."""
        payload = {
            "collection": collection_to_dict(collection),
            "tokens": [record_to_dict(r) for r in records],
        }
        try:
            self.registry_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.registry_dir, prefix=".index-", suffix=".json"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                os.replace(tmp_name, self.index_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise RegistryStoreError(f"Failed to write registry index {self.index_path}: {exc}") from exc

        logger.debug(
            "Saved registry index",
            extra={"data": {"path": str(self.index_path), "tokens": len(records)}},
        )
