import pytest
from google.api_core.exceptions import NotFound

from app.services.photo_upload_service import MAX_PHOTO_BYTES, get_photo_upload_service, photo_storage_path


def test_storage_path_layout():
    assert photo_storage_path("u1", "i1", "incident_i1_1.jpg") == "incidents/u1/i1/incident_i1_1.jpg"


def test_upload_writes_metadata_and_delete_removes():
    service = get_photo_upload_service()
    result = service.upload_photo(b"jpeg-bytes", user_id="u1", incident_id="i1")

    blob = service.bucket.blob(result["storage_path"])
    assert blob.exists()
    blob.reload()
    assert blob.content_type == "image/jpeg"
    assert blob.metadata["userId"] == "u1"
    assert blob.metadata["incidentId"] == "i1"
    assert blob.metadata["originalSize"] == str(len(b"jpeg-bytes"))

    service.delete_photo(result["storage_path"])
    assert not blob.exists()
    with pytest.raises(NotFound):
        service.delete_photo(result["storage_path"])


def test_upload_rejects_oversized():
    with pytest.raises(ValueError, match="MB limit"):
        get_photo_upload_service().upload_photo(b"x" * (MAX_PHOTO_BYTES + 1), user_id="u1", incident_id="i1")
