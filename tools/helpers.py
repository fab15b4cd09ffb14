"""Shared helper functions for tool implementations"""

import base64
import binascii
import logging
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger("Gallery_Server")


def read_upload_payload(
    file_path: Optional[str] = None,
    content_base64: Optional[str] = None,
    filename: Optional[str] = None,
) -> Tuple[bytes, Optional[str]]:
    """Resolve the bytes and filename of an upload request.

    Exactly one of file_path or content_base64 must be given. A data URI
    prefix ("data:image/png;base64,") and any line wrapping are stripped
    from content_base64.

    Raises:
        ValueError: On missing, ambiguous or undecodable input
    """
    if bool(file_path) == bool(content_base64):
        raise ValueError("Provide exactly one of file_path or content_base64")

    if file_path:
        path = Path(file_path).expanduser()
        if not path.is_file():
            raise ValueError(f"File {file_path} does not exist")
        return path.read_bytes(), filename or path.name

    encoded = content_base64
    if encoded.startswith("data:"):
        _, separator, encoded = encoded.partition(",")
        if not separator:
            raise ValueError("content_base64 data URI has no ',' before the payload")
    # Wrapped output from `base64` or encodebytes carries newlines
    encoded = "".join(encoded.split())
    try:
        return base64.b64decode(encoded, validate=True), filename
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"content_base64 is not valid base64: {e}")
