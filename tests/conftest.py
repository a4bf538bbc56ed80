import io

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from config import Settings
from storage import StorageGateway
from upload_validator import UploadedFileDescriptor

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def make_descriptor(filename="photo.png", content_type="image/png", data=PNG_BYTES):
    return UploadedFileDescriptor.from_stream(filename, content_type, io.BytesIO(data))


@pytest.fixture
def settings(tmp_path):
    return Settings(storage_root=tmp_path / "uploads")


@pytest.fixture
def gateway(settings):
    return StorageGateway(settings)


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))
