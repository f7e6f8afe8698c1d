import pytest
from google.api_core.exceptions import NotFound

from app.config.mock_firestore import MockWriteBatch
from app.services.user_service import ACTIVITIES, USERS, DuplicateEmailError, get_user_service
from tests.conftest import PASSWORD


def test_create_user_rejects_short_password(db):
    with pytest.raises(ValueError, match="at least 6"):
        get_user_service().create_user("short@example.com", "123", "Short Password")
    assert list(db.collection(USERS).stream()) == []


def test_create_user_duplicate_email():
    service = get_user_service()
    service.create_user("dup@example.com", PASSWORD, "First")
    with pytest.raises(DuplicateEmailError):
        service.create_user("DUP@example.com", PASSWORD, "Second")


def test_same_password_is_stored_with_different_hashes(signup, db):
    first, _ = signup("one@example.com")
    second, _ = signup("two@example.com")

    first_hash = db.collection(USERS).document(first["id"]).get().to_dict()["password_hash"]
    second_hash = db.collection(USERS).document(second["id"]).get().to_dict()["password_hash"]
    assert first_hash != second_hash
    assert PASSWORD not in first_hash


def test_award_points_is_all_or_nothing(signup, db, monkeypatch):
    user, _ = signup()
    original_commit = MockWriteBatch.commit

    def commit_with_missing_document(batch):
        batch.update(db.collection(USERS).document("missing-user"), {"points": 1})
        return original_commit(batch)

    monkeypatch.setattr(MockWriteBatch, "commit", commit_with_missing_document)

    with pytest.raises(NotFound):
        get_user_service().award_points(user["id"], 50)

    stored = db.collection(USERS).document(user["id"]).get().to_dict()
    assert stored["points"] == 0
    assert stored["badge"] == user["badge"]
    assert list(db.collection(ACTIVITIES).stream()) == []


def test_award_points_rejects_non_positive(signup):
    user, _ = signup()
    with pytest.raises(ValueError):
        get_user_service().award_points(user["id"], 0)
