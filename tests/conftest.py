from typing import Dict, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from vision_relay.config import Settings, get_settings
from vision_relay.main import app

BOUNDARY = "vision-relay-test-boundary"
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01"
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\n%%EOF\n"


def encode_multipart(
    fields: Optional[Dict[str, str]] = None,
    files: Optional[Dict[str, Tuple[str, bytes, str]]] = None,
) -> Tuple[bytes, str]:
    """Encode a multipart/form-data body. ``files`` maps field -> (filename, data, content type)."""
    body = b""
    for name, value in (fields or {}).items():
        body += (
            f"--{BOUNDARY}\r\n"
            f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
            f"{value}\r\n"
        ).encode("utf-8")
    for name, (filename, data, content_type) in (files or {}).items():
        body += (
            f"--{BOUNDARY}\r\n"
            f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
            f"Content-Type: {content_type}\r\n\r\n"
        ).encode("utf-8")
        body += data + b"\r\n"
    body += f"--{BOUNDARY}--\r\n".encode("utf-8")
    return body, f"multipart/form-data; boundary={BOUNDARY}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        allowed_api_keys="alpha-key, beta-key",
        openrouter_api_key="sk-upstream-secret",
        openrouter_endpoint="https://upstream.test/api/v1/chat/completions",
        openrouter_title="vision-relay tests",
    )


@pytest.fixture
def client(settings: Settings):
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def post_form(client: TestClient):
    """POST a multipart body with the given bearer token."""

    def _post(path="/", fields=None, files=None, token: Optional[str] = "alpha-key"):
        body, content_type = encode_multipart(fields, files)
        headers = {"Content-Type": content_type}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        return client.post(path, content=body, headers=headers)

    return _post
