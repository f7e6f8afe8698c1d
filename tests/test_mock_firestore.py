import json
from datetime import datetime

import pytest
from firebase_admin import firestore
from google.api_core.exceptions import NotFound

from app.config.mock_firestore import MockFirestore


def test_set_get_and_auto_ids(db):
    ref = db.collection("things").document()
    ref.set({"name": "a", "created_at": firestore.SERVER_TIMESTAMP})

    snap = ref.get()
    assert snap.exists
    assert len(ref.id) == 20
    assert snap.get("name") == "a"
    assert isinstance(snap.to_dict()["created_at"], datetime)
    assert not db.collection("things").document("missing").get().exists


def test_update_transforms_and_dotted_paths(db):
    ref = db.collection("users").document("u1")
    ref.set({"points": 10, "tags": ["a"], "location": {"city": "Mumbai"}, "temp": 1})

    ref.update({
        "points": firestore.Increment(5),
        "tags": firestore.ArrayUnion(["a", "b"]),
        "location.state": "Maharashtra",
        "temp": firestore.DELETE_FIELD,
    })

    data = ref.get().to_dict()
    assert data["points"] == 15
    assert data["tags"] == ["a", "b"]
    assert data["location"] == {"city": "Mumbai", "state": "Maharashtra"}
    assert "temp" not in data


def test_update_missing_document_raises(db):
    with pytest.raises(NotFound):
        db.collection("users").document("nobody").update({"points": 1})


def test_set_merge(db):
    ref = db.collection("users").document("u1")
    ref.set({"name": "a", "prefs": {"x": 1}})
    ref.set({"prefs": {"y": 2}}, merge=True)
    assert ref.get().to_dict() == {"name": "a", "prefs": {"x": 1, "y": 2}}


def test_queries(db):
    col = db.collection("incidents")
    for i, status in enumerate(["pending", "approved", "pending", "resolved"]):
        col.document(f"i{i}").set({"n": i, "status": status})
    col.document("no_n").set({"status": "pending"})

    pending = [doc.id for doc in col.where("status", "==", "pending").stream()]
    assert sorted(pending) == ["i0", "i2", "no_n"]

    ordered = [doc.id for doc in col.order_by("n", direction=firestore.Query.DESCENDING).limit(2).stream()]
    assert ordered == ["i3", "i2"]

    assert [doc.id for doc in col.where("n", ">=", 2).order_by("n").get()] == ["i2", "i3"]


def test_batch_is_all_or_nothing(db):
    col = db.collection("users")
    col.document("u1").set({"points": 0})

    batch = db.batch()
    batch.update(col.document("u1"), {"points": firestore.Increment(50)})
    batch.update(col.document("ghost"), {"points": 1})
    with pytest.raises(NotFound):
        batch.commit()

    assert col.document("u1").get().to_dict()["points"] == 0


def test_collections_lists_non_empty(db):
    assert db.collections() == []
    db.collection("users").document("u1").set({})
    assert [c.id for c in db.collections()] == ["users"]


def test_json_persistence(tmp_path):
    path = str(tmp_path / "mock_db.json")
    first = MockFirestore(path)
    first.collection("users").document("u1").set({"name": "a", "created_at": firestore.SERVER_TIMESTAMP})

    with open(path, encoding="utf-8") as f:
        assert "u1" in json.load(f)["users"]

    second = MockFirestore(path)
    data = second.collection("users").document("u1").get().to_dict()
    assert data["name"] == "a"
    assert isinstance(data["created_at"], datetime)
