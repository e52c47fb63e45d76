"""Embedding stores keyed by user id.

Two implementations of the EmbeddingStore protocol: an in-memory dict for
tests and single-process use, and a JSON file for simple persistence.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from faceverify.logging_config import get_logger

logger = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryEmbeddingStore:
    """Embedding store backed by a dict.

    Example:
        >>> store = InMemoryEmbeddingStore()
        >>> store.put("alice", embedding)
        >>> store.get("alice") is not None
        True
    """

    def __init__(self) -> None:
        self._records: Dict[str, dict] = {}

    def get(self, user_id: str) -> Optional[List[float]]:
        record = self._records.get(user_id)
        return list(record["embedding"]) if record else None

    def put(self, user_id: str, embedding: Sequence[float]) -> dict:
        """Insert or replace the embedding for user_id.

        Returns:
            Confirmation with user_id, created_at, and updated_at.
        """
        now = _now()
        existing = self._records.get(user_id)
        record = {
            "embedding": [float(v) for v in embedding],
            "created_at": existing["created_at"] if existing else now,
            "updated_at": now,
        }
        self._records[user_id] = record
        return {"user_id": user_id, "created_at": record["created_at"], "updated_at": now}

    def delete(self, user_id: str) -> bool:
        """Remove a user. Returns False if the user was not stored."""
        return self._records.pop(user_id, None) is not None

    def list_users(self) -> List[dict]:
        """List users with timestamps, most recently created first."""
        users = [
            {"user_id": uid, "created_at": r["created_at"], "updated_at": r["updated_at"]}
            for uid, r in self._records.items()
        ]
        return sorted(users, key=lambda u: u["created_at"], reverse=True)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(users={len(self)})"


class JsonEmbeddingStore(InMemoryEmbeddingStore):
    """Embedding store persisted to a JSON file.

    The whole file is rewritten on every change, which is fine for the
    small galleries this store is meant for.

    Attributes:
        path: JSON file holding {user_id: {embedding, created_at, updated_at}}
    """

    def __init__(self, path: str | Path):
        """Open (or create) the store.

        Args:
            path: JSON file location; parent directories are created.

        Raises:
            ValueError: If an existing file is not a JSON object.
        """
        super().__init__()
        self.path = Path(path)

        if self.path.exists():
            with open(self.path, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"Embedding store {self.path} must contain a JSON object")
            self._records = data
            logger.info(f"Loaded {len(self._records)} embeddings from {self.path}")
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def _flush(self) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump(self._records, f)
        tmp_path.replace(self.path)

    def put(self, user_id: str, embedding: Sequence[float]) -> dict:
        confirmation = super().put(user_id, embedding)
        self._flush()
        logger.debug(f"Stored embedding for '{user_id}' in {self.path}")
        return confirmation

    def delete(self, user_id: str) -> bool:
        deleted = super().delete(user_id)
        if deleted:
            self._flush()
            logger.info(f"Deleted user '{user_id}'")
        return deleted

    def __repr__(self) -> str:
        return f"JsonEmbeddingStore(path={self.path}, users={len(self)})"
