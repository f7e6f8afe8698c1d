"""
Local-directory bucket used in mock DB mode instead of Cloud Storage.

Mirrors the handful of google.cloud.storage Bucket/Blob calls the photo upload
service relies on.
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional

from google.api_core.exceptions import NotFound


class MockBlob:

    def __init__(self, bucket: "MockBucket", name: str):
        self.bucket = bucket
        self.name = name
        self.metadata: Optional[Dict[str, str]] = None
        self.content_type: Optional[str] = None
        self.size: Optional[int] = None

    @property
    def _file(self) -> Path:
        return self.bucket.root / self.name

    @property
    def _meta_file(self) -> Path:
        return self.bucket.root / f"{self.name}.meta.json"

    @property
    def public_url(self) -> str:
        return self._file.resolve().as_uri()

    def upload_from_string(self, data, content_type: Optional[str] = None) -> None:
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self._file.parent.mkdir(parents=True, exist_ok=True)
        self._file.write_bytes(payload)
        self.content_type = content_type or self.content_type
        self.size = len(payload)
        self._meta_file.write_text(
            json.dumps({"content_type": self.content_type, "metadata": self.metadata or {}}),
            encoding="utf-8",
        )

    def make_public(self) -> None:
        # Local files are always readable
        return None

    def exists(self) -> bool:
        return self._file.exists()

    def download_as_bytes(self) -> bytes:
        if not self.exists():
            raise NotFound(f"No such object: {self.bucket.name}/{self.name}")
        return self._file.read_bytes()

    def reload(self) -> None:
        if not self.exists():
            raise NotFound(f"No such object: {self.bucket.name}/{self.name}")
        self.size = self._file.stat().st_size
        if self._meta_file.exists():
            meta = json.loads(self._meta_file.read_text(encoding="utf-8"))
            self.content_type = meta.get("content_type")
            self.metadata = meta.get("metadata") or None

    def delete(self) -> None:
        if not self.exists():
            raise NotFound(f"No such object: {self.bucket.name}/{self.name}")
        self._file.unlink()
        if self._meta_file.exists():
            self._meta_file.unlink()


class MockBucket:

    def __init__(self, root: str, name: str = "mock-bucket"):
        self.root = Path(root)
        self.name = name
        os.makedirs(self.root, exist_ok=True)

    def blob(self, name: str) -> MockBlob:
        return MockBlob(self, name)


def get_mock_bucket(root: str) -> MockBucket:
    return MockBucket(root)
