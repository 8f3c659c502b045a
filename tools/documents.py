import json
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

import redis
from loguru import logger

from tools.redis_client import connect_redis


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _sort_key(value: Any) -> Tuple[bool, Any]:
    # Nested values sort by their JSON text
    if isinstance(value, (dict, list)):
        value = json.dumps(value, sort_keys=True, default=str)
    return value is not None, value


class StorageError(Exception):
    """Raised when the backing Redis server fails an operation."""


@contextmanager
def _redis_errors(op: str, collection: str):
    try:
        yield
    except redis.RedisError as e:
        logger.error(f"Redis {op} failed for {collection}: {e}")
        raise StorageError(f"{op} on {collection} failed") from e


class DocumentStore:
    """JSON document collections kept in Redis hashes (one hash per collection)."""

    def __init__(self, client=None):
        self.r = client if client is not None else connect_redis()
        self._memory: Dict[str, Dict[str, str]] = {}

    @staticmethod
    def _key(collection: str) -> str:
        return f"docs:{collection}"

    def _hget(self, collection: str, doc_id: str) -> Optional[str]:
        if self.r:
            with _redis_errors("hget", collection):
                return self.r.hget(self._key(collection), doc_id)
        return self._memory.get(collection, {}).get(doc_id)

    def _hset(self, collection: str, doc_id: str, raw: str) -> None:
        if self.r:
            with _redis_errors("hset", collection):
                self.r.hset(self._key(collection), doc_id, raw)
        else:
            self._memory.setdefault(collection, {})[doc_id] = raw

    def _hvals(self, collection: str) -> List[str]:
        if self.r:
            with _redis_errors("hvals", collection):
                return list(self.r.hvals(self._key(collection)))
        return list(self._memory.get(collection, {}).values())

    def insert(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Store a new document, assigning id and timestamps when missing."""
        doc = dict(doc)
        doc.setdefault("id", uuid4().hex)
        doc.setdefault("created_at", _now_iso())
        doc.setdefault("updated_at", doc["created_at"])
        self._hset(collection, doc["id"], json.dumps(doc, default=str))
        logger.info(f"Inserted {collection} document {doc['id']}")
        return doc

    def get(self, collection: str, doc_id: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Fetch a document, optionally scoped to its owner."""
        raw = self._hget(collection, doc_id)
        if raw is None:
            return None
        doc = json.loads(raw)
        if user_id is not None and doc.get("user_id") != user_id:
            return None
        return doc

    def replace(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite a whole document (last writer wins)."""
        doc = dict(doc)
        doc["updated_at"] = _now_iso()
        self._hset(collection, doc["id"], json.dumps(doc, default=str))
        return doc

    def update(self, collection: str, doc_id: str, changes: Dict[str, Any],
               user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        doc = self.get(collection, doc_id, user_id)
        if doc is None:
            return None
        doc.update(changes)
        return self.replace(collection, doc)

    def delete(self, collection: str, doc_id: str, user_id: Optional[str] = None) -> bool:
        if self.get(collection, doc_id, user_id) is None:
            return False
        if self.r:
            with _redis_errors("hdel", collection):
                self.r.hdel(self._key(collection), doc_id)
        else:
            self._memory.get(collection, {}).pop(doc_id, None)
        logger.info(f"Deleted {collection} document {doc_id}")
        return True

    def find(
        self,
        collection: str,
        user_id: Optional[str] = None,
        where: Optional[Callable[[Dict[str, Any]], bool]] = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        """Return matching documents of a collection, sorted by one field."""
        docs = [json.loads(raw) for raw in self._hvals(collection)]
        if user_id is not None:
            docs = [d for d in docs if d.get("user_id") == user_id]
        if where is not None:
            docs = [d for d in docs if where(d)]
        docs.sort(key=lambda d: _sort_key(d.get(sort_by)), reverse=descending)
        return docs

    def page(self, docs: List[Dict[str, Any]], page: int = 1, limit: int = 10) -> Tuple[List[Dict[str, Any]], Dict[str, int]]:
        """Slice a result list and describe the pagination."""
        page = max(1, page)
        limit = max(1, limit)
        total = len(docs)
        start = (page - 1) * limit
        pagination = {
            "current": page,
            "pages": (total + limit - 1) // limit,
            "total": total
        }
        return docs[start:start + limit], pagination


# Global document store instance
document_store = DocumentStore()


def get_document_store() -> DocumentStore:
    return document_store
