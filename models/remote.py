"""Response schemas for the GitHub contents API"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ContentsUploadResponse:
    """Body of a successful PUT /repos/{owner}/{repo}/contents/{path}"""
    download_url: str

    @classmethod
    def from_json(cls, data: Any) -> "ContentsUploadResponse":
        """Validate the response shape, raising ValueError when it is off"""
        if not isinstance(data, dict):
            raise ValueError("response body is not a JSON object")
        content = data.get("content")
        if not isinstance(content, dict):
            raise ValueError("response has no 'content' object")
        download_url = content.get("download_url")
        if not isinstance(download_url, str) or not download_url:
            raise ValueError("response content has no 'download_url'")
        return cls(download_url=download_url)


@dataclass
class ContentsMetadata:
    """Body of GET /repos/{owner}/{repo}/contents/{path} for a single file"""
    sha: str

    @classmethod
    def from_json(cls, data: Any) -> "ContentsMetadata":
        if not isinstance(data, dict):
            raise ValueError("metadata body is not a JSON object")
        sha = data.get("sha")
        if not isinstance(sha, str) or not sha:
            raise ValueError("metadata has no 'sha' revision marker")
        return cls(sha=sha)


@dataclass
class UploadResult:
    success: bool
    url: Optional[str] = None
    path: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


@dataclass
class DeleteResult:
    """Outcome of a best-effort remote delete.

    Failure is a normal outcome here: callers may ignore it, and the object
    is falsy when the delete did not happen.
    """
    success: bool
    path: str
    status_code: Optional[int] = None
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success
