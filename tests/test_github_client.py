"""Tests for the GitHub contents client

Run with pytest from project root:
    pytest tests/test_github_client.py -v
"""

import base64
import re
from unittest.mock import patch

import pytest
import requests

from github_client import (
    ConfigurationMissing,
    GitHubContentsClient,
    MalformedResponse,
    NetworkFailure,
    RemoteRejected,
)
from models.credential import Credential

UPLOAD_BODY = {
    "content": {
        "path": "uploaded-images/1700000000000-x.jpg",
        "sha": "abc123",
        "download_url": "https://raw.githubusercontent.com/o/r/main/uploaded-images/x.jpg",
    }
}


class FakeClock:
    def __init__(self, start=1700000000.0, step=0.005):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def client(configured_store):
    return GitHubContentsClient(configured_store, api_url="https://api.github.com", branch="main", clock=FakeClock())


class TestErrors:
    """Tests for the error taxonomy"""

    def test_error_codes(self):
        assert ConfigurationMissing("x").error_code == "configuration_missing"
        assert NetworkFailure("x").error_code == "network_failure"
        assert MalformedResponse("x").error_code == "malformed_response"

    def test_remote_rejected_keeps_status_and_body(self):
        error = RemoteRejected(422, '{"message": "Invalid request"}')
        assert error.status_code == 422
        assert error.body == '{"message": "Invalid request"}'
        assert "422" in str(error)
        assert "Invalid request" in str(error)


class TestPaths:
    """Tests for remote path and URL construction"""

    def test_build_remote_path(self, client):
        path = client.build_remote_path("cat.png")
        assert path == "uploaded-images/1700000000000-cat.png"

    def test_repeated_filenames_never_collide(self, client):
        """Test two uploads of one name get distinct timestamp prefixes"""
        first = client.build_remote_path("cat.png")
        second = client.build_remote_path("cat.png")

        assert first != second
        assert first.endswith("-cat.png")
        assert second.endswith("-cat.png")

    def test_same_millisecond_paths_differ(self, configured_store):
        """Test a frozen clock still yields distinct paths for one filename"""
        client = GitHubContentsClient(configured_store, clock=lambda: 1700000000.0)

        paths = [client.build_remote_path("cat.png") for _ in range(3)]

        assert paths == [
            "uploaded-images/1700000000000-cat.png",
            "uploaded-images/1700000000001-cat.png",
            "uploaded-images/1700000000002-cat.png",
        ]

    def test_same_millisecond_uploads_both_succeed(self, configured_store, make_response):
        client = GitHubContentsClient(configured_store, clock=lambda: 1700000000.0)
        with patch("github_client.requests.request", return_value=make_response(201, UPLOAD_BODY)) as mock_request:
            first = client.upload_image(b"a", "cat.png")
            second = client.upload_image(b"b", "cat.png")

        assert first.success and second.success
        assert first.path != second.path
        assert mock_request.call_args_list[0].args[1] != mock_request.call_args_list[1].args[1]

    def test_contents_url_quotes_path(self, client):
        url = client.contents_url(Credential("t", "o", "r"), "uploaded-images/1-my photo.jpg")
        assert url == "https://api.github.com/repos/o/r/contents/uploaded-images/1-my%20photo.jpg"

    def test_env_settings(self, configured_store, monkeypatch):
        """Test API URL and branch fall back to the environment"""
        monkeypatch.setenv("GALLERY_GITHUB_API_URL", "https://github.example.com/api/v3/")
        monkeypatch.setenv("GALLERY_GITHUB_BRANCH", "gh-pages")

        client = GitHubContentsClient(configured_store)
        assert client.api_url == "https://github.example.com/api/v3"
        assert client.branch == "gh-pages"


class TestUpload:
    """Tests for upload_image"""

    def test_unconfigured_makes_no_request(self, empty_store):
        """Test upload is refused before any network call"""
        client = GitHubContentsClient(empty_store)
        with patch("github_client.requests.request") as mock_request:
            result = client.upload_image(b"data", "cat.png")

        mock_request.assert_not_called()
        assert result.success is False
        assert result.error_code == "configuration_missing"

    def test_success(self, client, make_response):
        """Test a single PUT with the expected body returns the download URL"""
        with patch("github_client.requests.request", return_value=make_response(201, UPLOAD_BODY)) as mock_request:
            result = client.upload_image(b"\x89PNG binary", "x.jpg")

        assert result.success is True
        assert result.url == UPLOAD_BODY["content"]["download_url"]
        assert result.path == "uploaded-images/1700000000000-x.jpg"

        assert mock_request.call_count == 1
        args, kwargs = mock_request.call_args
        assert args[0] == "PUT"
        assert re.fullmatch(r"https://api\.github\.com/repos/o/r/contents/uploaded-images/\d+-x\.jpg", args[1])
        assert kwargs["headers"]["Authorization"] == "token t"
        assert kwargs["json"] == {
            "message": "Upload image: x.jpg",
            "content": base64.b64encode(b"\x89PNG binary").decode("ascii"),
            "branch": "main",
        }
        assert kwargs["timeout"] is None

    def test_two_uploads_use_distinct_paths(self, client, make_response):
        with patch("github_client.requests.request", return_value=make_response(201, UPLOAD_BODY)) as mock_request:
            first = client.upload_image(b"a", "cat.png")
            second = client.upload_image(b"a", "cat.png")

        urls = [call.args[1] for call in mock_request.call_args_list]
        assert urls[0] != urls[1]
        assert first.path != second.path

    def test_rejected(self, client, make_response):
        """Test non-2xx carries status and body verbatim"""
        body = '{"message": "Bad credentials"}'
        with patch("github_client.requests.request", return_value=make_response(401, text=body)):
            result = client.upload_image(b"a", "cat.png")

        assert result.success is False
        assert result.error_code == "remote_rejected"
        assert "401" in result.error
        assert body in result.error

    def test_network_failure(self, client):
        with patch("github_client.requests.request", side_effect=requests.ConnectionError("unreachable")):
            result = client.upload_image(b"a", "cat.png")

        assert result.success is False
        assert result.error_code == "network_failure"
        assert "unreachable" in result.error

    def test_non_json_body(self, client, make_response):
        with patch("github_client.requests.request", return_value=make_response(201, ValueError("no json"))):
            result = client.upload_image(b"a", "cat.png")

        assert result.success is False
        assert result.error_code == "network_failure"

    @pytest.mark.parametrize("body", [
        {},
        {"content": None},
        {"content": {"path": "uploaded-images/1-x.jpg"}},
        {"content": {"download_url": None}},
    ])
    def test_missing_download_url_is_failure(self, client, body, make_response):
        with patch("github_client.requests.request", return_value=make_response(201, body)):
            result = client.upload_image(b"a", "x.jpg")

        assert result.success is False
        assert result.error_code == "malformed_response"

class TestDelete:
    """Tests for delete_image"""

    PATH = "uploaded-images/1700000000000-x.jpg"

    def test_success(self, client, make_response):
        """Test metadata fetch then DELETE carrying the fetched sha"""
        responses = [make_response(200, {"sha": "R1", "path": self.PATH}), make_response(200, {"commit": {}})]
        with patch("github_client.requests.request", side_effect=responses) as mock_request:
            result = client.delete_image(self.PATH)

        assert bool(result) is True
        assert result.status_code == 200

        get_call, delete_call = mock_request.call_args_list
        assert get_call.args[0] == "GET"
        assert get_call.args[1].endswith(f"/contents/{self.PATH}")
        assert delete_call.args[0] == "DELETE"
        assert delete_call.args[1] == get_call.args[1]
        assert delete_call.kwargs["json"] == {
            "message": f"Delete image: {self.PATH}",
            "sha": "R1",
            "branch": "main",
        }

    def test_metadata_fetch_failure(self, client, make_response):
        """Test a missing object reports False without raising"""
        with patch("github_client.requests.request", return_value=make_response(404, text="Not Found")) as mock_request:
            result = client.delete_image(self.PATH)

        assert bool(result) is False
        assert result.status_code == 404
        assert mock_request.call_count == 1

    def test_stale_sha(self, client, make_response):
        """Test GitHub refusing a stale revision marker reports False"""
        responses = [make_response(200, {"sha": "R1"}), make_response(409, text="sha does not match")]
        with patch("github_client.requests.request", side_effect=responses) as mock_request:
            result = client.delete_image(self.PATH)

        assert bool(result) is False
        assert result.status_code == 409
        assert mock_request.call_args_list[1].kwargs["json"]["sha"] == "R1"

    def test_metadata_without_sha(self, client, make_response):
        with patch("github_client.requests.request", return_value=make_response(200, {"path": self.PATH})) as mock_request:
            result = client.delete_image(self.PATH)

        assert bool(result) is False
        assert "sha" in result.error
        assert mock_request.call_count == 1

    def test_network_failure(self, client):
        with patch("github_client.requests.request", side_effect=requests.Timeout("timed out")):
            result = client.delete_image(self.PATH)

        assert bool(result) is False
        assert result.path == self.PATH

    def test_sha_fetched_fresh_every_time(self, client, make_response):
        responses = [
            make_response(200, {"sha": "R1"}), make_response(200, {}),
            make_response(200, {"sha": "R2"}), make_response(200, {}),
        ]
        with patch("github_client.requests.request", side_effect=responses) as mock_request:
            client.delete_image(self.PATH)
            client.delete_image(self.PATH)

        methods = [call.args[0] for call in mock_request.call_args_list]
        assert methods == ["GET", "DELETE", "GET", "DELETE"]
        assert mock_request.call_args_list[3].kwargs["json"]["sha"] == "R2"

    def test_unconfigured(self, empty_store):
        client = GitHubContentsClient(empty_store)
        with patch("github_client.requests.request") as mock_request:
            result = client.delete_image(self.PATH)

        mock_request.assert_not_called()
        assert bool(result) is False


class TestEndToEnd:
    """Configure then upload, as the admin panel does"""

    def test_configure_then_upload(self, empty_store, make_response):
        client = GitHubContentsClient(empty_store, clock=FakeClock())
        assert empty_store.is_configured() is False

        empty_store.set(Credential(token="t", owner="o", repo="r"))
        assert empty_store.is_configured() is True

        body = {"content": {"download_url": "https://raw.githubusercontent.com/o/r/main/x.jpg"}}
        with patch("github_client.requests.request", return_value=make_response(201, body)) as mock_request:
            result = client.upload_image(b"file", "x.jpg")

        assert mock_request.call_count == 1
        assert mock_request.call_args.args[0] == "PUT"
        assert re.search(r"/contents/uploaded-images/\d+-x\.jpg$", mock_request.call_args.args[1])
        assert result.success is True
        assert result.url == "https://raw.githubusercontent.com/o/r/main/x.jpg"
        assert re.fullmatch(r"uploaded-images/\d+-x\.jpg", result.path)
