"""Shared fixtures for gallery server tests"""

from io import BytesIO
from unittest.mock import Mock

import pytest
from PIL import Image

from managers.credential_store import CredentialStore
from models.credential import Credential


def _make_response(status_code, json_data=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def make_response():
    """Factory for stand-ins of requests.Response"""
    return _make_response


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config" / "github_config.json"


@pytest.fixture
def empty_store(config_file):
    """Store with no injected values and nothing saved"""
    return CredentialStore(config_file=config_file, injected={})


@pytest.fixture
def configured_store(empty_store):
    empty_store.set(Credential(token="t", owner="o", repo="r"))
    return empty_store


@pytest.fixture
def png_bytes():
    output = BytesIO()
    Image.new("RGBA", (64, 32), (200, 100, 50, 128)).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def jpeg_bytes():
    output = BytesIO()
    Image.new("RGB", (1200, 800), (10, 20, 30)).save(output, format="JPEG")
    return output.getvalue()
