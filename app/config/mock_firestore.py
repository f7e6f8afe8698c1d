"""
In-process Firestore stand-in for local development (USE_MOCK_DB=true).

Covers the subset of the firebase_admin Firestore client that the services use:
collection/document references, where/order_by/limit queries, write batches and
the SERVER_TIMESTAMP / Increment / ArrayUnion / DELETE_FIELD transforms.

Data lives in memory and is flushed to a JSON file after every write unless the
path is ":memory:".
"""

import copy
import json
import logging
import os
import random
import string
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

from firebase_admin import firestore
from google.api_core.exceptions import NotFound

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

_AUTO_ID_CHARS = string.ascii_letters + string.digits
_MISSING = object()


def _auto_id() -> str:
    return "".join(random.choice(_AUTO_ID_CHARS) for _ in range(20))


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _resolve(value: Any, current: Any = _MISSING) -> Any:
    """Apply Firestore field transforms and copy plain values."""
    if value is firestore.SERVER_TIMESTAMP:
        return _now()
    if isinstance(value, firestore.Increment):
        base = current if isinstance(current, (int, float)) and not isinstance(current, bool) else 0
        return base + value.value
    if isinstance(value, firestore.ArrayUnion):
        merged = list(current) if isinstance(current, list) else []
        for item in value.values:
            if item not in merged:
                merged.append(copy.deepcopy(item))
        return merged
    if isinstance(value, dict):
        return {key: _resolve(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve(item) for item in value]
    return copy.deepcopy(value)


def _get_path(data: Dict, field_path: str) -> Any:
    node: Any = data
    for part in field_path.split("."):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _set_path(data: Dict, field_path: str, value: Any) -> None:
    parts = field_path.split(".")
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    leaf = parts[-1]
    if value is firestore.DELETE_FIELD:
        node.pop(leaf, None)
    else:
        node[leaf] = _resolve(value, node.get(leaf, _MISSING))


def _merge(target: Dict, incoming: Dict) -> None:
    for key, value in incoming.items():
        if value is firestore.DELETE_FIELD:
            target.pop(key, None)
        elif isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = _resolve(value, target.get(key, _MISSING))


def _matches(actual: Any, op: str, expected: Any) -> bool:
    if actual is _MISSING:
        return False
    try:
        if op == "==":
            return actual == expected
        if op == "!=":
            return actual != expected
        if op == "<":
            return actual < expected
        if op == "<=":
            return actual <= expected
        if op == ">":
            return actual > expected
        if op == ">=":
            return actual >= expected
        if op == "in":
            return actual in expected
        if op == "not-in":
            return actual not in expected
        if op == "array_contains":
            return isinstance(actual, list) and expected in actual
        if op == "array_contains_any":
            return isinstance(actual, list) and any(item in actual for item in expected)
    except TypeError:
        # Firestore never matches across incomparable types
        return False
    raise ValueError(f"Unsupported query operator: {op}")


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return {"__datetime__": value.isoformat()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode(obj: Dict) -> Any:
    if set(obj.keys()) == {"__datetime__"}:
        return datetime.fromisoformat(obj["__datetime__"])
    return obj


class MockDocumentSnapshot:
    """Read-only view of a document at the time it was fetched."""

    def __init__(self, reference: "MockDocumentReference", data: Optional[Dict]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict]:
        return copy.deepcopy(self._data) if self._data is not None else None

    def get(self, field_path: str) -> Any:
        if self._data is None:
            return None
        value = _get_path(self._data, field_path)
        return None if value is _MISSING else copy.deepcopy(value)


class MockDocumentReference:

    def __init__(self, client: "MockFirestore", collection_name: str, document_id: str):
        self._client = client
        self._collection = collection_name
        self.id = document_id

    @property
    def path(self) -> str:
        return f"{self._collection}/{self.id}"

    def get(self) -> MockDocumentSnapshot:
        return MockDocumentSnapshot(self, self._client._read(self._collection, self.id))

    def set(self, data: Dict, merge: bool = False) -> None:
        self._client._apply([("set", self, data, merge)])

    def update(self, data: Dict) -> None:
        self._client._apply([("update", self, data, False)])

    def delete(self) -> None:
        self._client._apply([("delete", self, None, False)])


class MockQuery:
    """Immutable query builder; every call returns a new query."""

    def __init__(
        self,
        client: "MockFirestore",
        collection_name: str,
        filters: Tuple = (),
        orders: Tuple = (),
        limit_count: Optional[int] = None,
    ):
        self._client = client
        self._collection = collection_name
        self._filters = filters
        self._orders = orders
        self._limit = limit_count

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        filters = self._filters + ((field_path, op_string, value),)
        return MockQuery(self._client, self._collection, filters, self._orders, self._limit)

    def order_by(self, field_path: str, direction: str = firestore.Query.ASCENDING) -> "MockQuery":
        orders = self._orders + ((field_path, direction),)
        return MockQuery(self._client, self._collection, self._filters, orders, self._limit)

    def limit(self, count: int) -> "MockQuery":
        return MockQuery(self._client, self._collection, self._filters, self._orders, count)

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        rows = self._client._snapshot_collection(self._collection)

        for field_path, op, expected in self._filters:
            rows = [(doc_id, data) for doc_id, data in rows if _matches(_get_path(data, field_path), op, expected)]

        for field_path, direction in reversed(self._orders):
            # Documents without the ordered field are excluded, as in Firestore
            rows = [(doc_id, data) for doc_id, data in rows if _get_path(data, field_path) is not _MISSING]
            rows.sort(
                key=lambda row: _sort_key(_get_path(row[1], field_path)),
                reverse=direction == firestore.Query.DESCENDING,
            )

        if self._limit is not None:
            rows = rows[: self._limit]

        for doc_id, data in rows:
            reference = MockDocumentReference(self._client, self._collection, doc_id)
            yield MockDocumentSnapshot(reference, data)

    def get(self) -> List[MockDocumentSnapshot]:
        return list(self.stream())


def _sort_key(value: Any) -> Tuple:
    # None sorts first, then numbers, strings and timestamps among themselves
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, datetime):
        return (3, value.timestamp())
    if isinstance(value, str):
        return (4, value)
    return (5, str(value))


class MockCollectionReference(MockQuery):

    def __init__(self, client: "MockFirestore", collection_name: str):
        super().__init__(client, collection_name)
        self.id = collection_name

    def document(self, document_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._client, self._collection, document_id or _auto_id())

    def add(self, data: Dict) -> Tuple[datetime, MockDocumentReference]:
        reference = self.document()
        reference.set(data)
        return _now(), reference


class MockWriteBatch:
    """Collects writes and applies them all-or-nothing on commit()."""

    def __init__(self, client: "MockFirestore"):
        self._client = client
        self._ops: List[Tuple] = []

    def set(self, reference: MockDocumentReference, data: Dict, merge: bool = False) -> "MockWriteBatch":
        self._ops.append(("set", reference, data, merge))
        return self

    def update(self, reference: MockDocumentReference, data: Dict) -> "MockWriteBatch":
        self._ops.append(("update", reference, data, False))
        return self

    def delete(self, reference: MockDocumentReference) -> "MockWriteBatch":
        self._ops.append(("delete", reference, None, False))
        return self

    def commit(self) -> List:
        ops, self._ops = self._ops, []
        self._client._apply(ops)
        return []


class MockFirestore:
    """
    Minimal Firestore client backed by a dict of collections.

    Structure: {collection_name: {document_id: document_dict}}
    """

    def __init__(self, path: str = MEMORY_PATH):
        self.path = path
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Dict]] = {}
        self._load()

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self._lock:
            return [MockCollectionReference(self, name) for name, docs in self._data.items() if docs]

    def batch(self) -> MockWriteBatch:
        return MockWriteBatch(self)

    def _read(self, collection_name: str, document_id: str) -> Optional[Dict]:
        with self._lock:
            data = self._data.get(collection_name, {}).get(document_id)
            return copy.deepcopy(data) if data is not None else None

    def _snapshot_collection(self, collection_name: str) -> List[Tuple[str, Dict]]:
        with self._lock:
            docs = self._data.get(collection_name, {})
            return [(doc_id, copy.deepcopy(data)) for doc_id, data in docs.items()]

    def _apply(self, ops: List[Tuple]) -> None:
        with self._lock:
            # Validate first so a failing batch leaves nothing half-written
            for kind, reference, _, _ in ops:
                if kind == "update" and reference.id not in self._data.get(reference._collection, {}):
                    raise NotFound(f"No document to update: {reference.path}")

            for kind, reference, data, merge in ops:
                docs = self._data.setdefault(reference._collection, {})
                if kind == "set":
                    if merge and reference.id in docs:
                        _merge(docs[reference.id], data)
                    else:
                        docs[reference.id] = _resolve(data)
                elif kind == "update":
                    for field_path, value in data.items():
                        _set_path(docs[reference.id], field_path, value)
                elif kind == "delete":
                    docs.pop(reference.id, None)

            self._flush()

    def _load(self) -> None:
        if self.path == MEMORY_PATH or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                self._data = json.load(f, object_hook=_decode)
            logger.info(f"Mock DB loaded from {self.path}")
        except (OSError, ValueError) as e:
            logger.warning(f"Mock DB file unreadable ({e}), starting empty")
            self._data = {}

    def _flush(self) -> None:
        if self.path == MEMORY_PATH:
            return
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, default=_encode, indent=2)


def get_mock_db(path: str = MEMORY_PATH) -> MockFirestore:
    return MockFirestore(path)
