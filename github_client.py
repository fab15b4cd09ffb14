import base64
import logging
import os
import time
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

import requests

from models.credential import Credential
from models.remote import ContentsMetadata, ContentsUploadResponse, DeleteResult, UploadResult

logger = logging.getLogger("GitHubClient")

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_BRANCH = "main"
IMAGES_FOLDER = "uploaded-images"


class GitHubStoreError(Exception):
    error_code = "github_error"


class ConfigurationMissing(GitHubStoreError):
    error_code = "configuration_missing"


class RemoteRejected(GitHubStoreError):
    error_code = "remote_rejected"

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"GitHub API error: {status_code} - {body}")


class NetworkFailure(GitHubStoreError):
    error_code = "network_failure"


class MalformedResponse(GitHubStoreError):
    error_code = "malformed_response"


class GitHubContentsClient:
    """Stores gallery images in a GitHub repository through the contents API.

    Every call reads the credential fresh from the store, so settings saved
    while the server runs apply to the next request. No retries and, unless
    a timeout is given, no request timeout.
    """

    def __init__(
        self,
        credential_store,
        api_url: Optional[str] = None,
        branch: Optional[str] = None,
        folder: str = IMAGES_FOLDER,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.credential_store = credential_store
        self.api_url = (api_url or os.getenv("GALLERY_GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.branch = branch or os.getenv("GALLERY_GITHUB_BRANCH") or DEFAULT_BRANCH
        self.folder = folder
        self.timeout = timeout
        self.clock = clock
        self._last_stamp = 0

    def build_remote_path(self, filename: str) -> str:
        # Millisecond prefix keeps repeated uploads of one filename apart;
        # within one millisecond the stamp is bumped so it never repeats
        stamp = max(int(self.clock() * 1000), self._last_stamp + 1)
        self._last_stamp = stamp
        return f"{self.folder}/{stamp}-{filename}"

    def contents_url(self, credential: Credential, path: str) -> str:
        return f"{self.api_url}/repos/{credential.owner}/{credential.repo}/contents/{quote(path, safe='/')}"

    def _headers(self, credential: Credential) -> Dict[str, str]:
        return {
            "Authorization": f"token {credential.token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
        }

    def _require_credential(self) -> Credential:
        credential = self.credential_store.get()
        if credential is None:
            raise ConfigurationMissing(
                "GitHub is not configured. Set the token, owner and repository before uploading."
            )
        return credential

    def _send(self, method: str, url: str, credential: Credential, payload: Optional[Dict[str, Any]] = None):
        try:
            response = requests.request(
                method,
                url,
                headers=self._headers(credential),
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkFailure(f"GitHub request failed: {e}") from e
        if not response.ok:
            raise RemoteRejected(response.status_code, response.text)
        return response

    def _json(self, response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise NetworkFailure(f"GitHub returned a non-JSON body: {e}") from e

    def _put_contents(self, credential: Credential, path: str, content: str, filename: str) -> ContentsUploadResponse:
        payload = {
            "message": f"Upload image: {filename}",
            "content": content,
            "branch": self.branch,
        }
        response = self._send("PUT", self.contents_url(credential, path), credential, payload)
        try:
            return ContentsUploadResponse.from_json(self._json(response))
        except ValueError as e:
            raise MalformedResponse(f"Unexpected upload response: {e}") from e

    def _get_metadata(self, credential: Credential, path: str) -> ContentsMetadata:
        response = self._send("GET", self.contents_url(credential, path), credential)
        try:
            return ContentsMetadata.from_json(self._json(response))
        except ValueError as e:
            raise MalformedResponse(f"Unexpected metadata response: {e}") from e

    def upload_image(self, payload: bytes, filename: str) -> UploadResult:
        """Create a new file under the images folder and return its download URL.

        Not idempotent: each call writes a new, timestamped path. Paths are
        unique per client instance, even for two calls in one millisecond;
        separate processes uploading the same filename in the same
        millisecond can still collide, and GitHub then rejects the second
        PUT with a 422.
        """
        try:
            credential = self._require_credential()
            content = base64.b64encode(payload).decode("ascii")
            path = self.build_remote_path(filename)
            uploaded = self._put_contents(credential, path, content, filename)
        except GitHubStoreError as e:
            logger.error(f"Error uploading {filename} to GitHub: {e}")
            return UploadResult(success=False, error=str(e), error_code=e.error_code)

        logger.info(f"Uploaded {filename} to {credential.owner}/{credential.repo}:{path}")
        return UploadResult(success=True, url=uploaded.download_url, path=path)

    def delete_image(self, remote_path: str) -> DeleteResult:
        """Delete a previously uploaded file.

        The revision marker is fetched right before the delete; if the file
        changed or vanished in between, GitHub refuses and this returns a
        failed result instead of raising.
        """
        try:
            credential = self._require_credential()
            metadata = self._get_metadata(credential, remote_path)
            payload = {
                "message": f"Delete image: {remote_path}",
                "sha": metadata.sha,
                "branch": self.branch,
            }
            response = self._send("DELETE", self.contents_url(credential, remote_path), credential, payload)
        except RemoteRejected as e:
            logger.warning(f"GitHub refused to delete {remote_path}: {e.status_code}")
            return DeleteResult(success=False, path=remote_path, status_code=e.status_code, error=str(e))
        except GitHubStoreError as e:
            logger.warning(f"Error deleting {remote_path} from GitHub: {e}")
            return DeleteResult(success=False, path=remote_path, error=str(e))

        logger.info(f"Deleted {remote_path} from {credential.owner}/{credential.repo}")
        return DeleteResult(success=True, path=remote_path, status_code=response.status_code)
