"""Gallery manager tying uploads, deletes and edits to the catalog"""

import logging
from typing import Any, Dict, Optional, Sequence

from github_client import ConfigurationMissing
from image_processor import get_image_metadata, guess_filename

logger = logging.getLogger("Gallery_Server")


class GalleryManager:
    """Runs the admin panel actions against the catalog and the GitHub store.

    The catalog is what the gallery renders. An upload adds a record only
    after GitHub accepted the file; a delete removes the record first and
    treats the GitHub side as best effort.
    """

    def __init__(self, catalog, github_client, configuration):
        self.catalog = catalog
        self.github_client = github_client
        self.configuration = configuration

    def upload_image(
        self,
        payload: bytes,
        filename: Optional[str],
        title: str,
        description: str = "",
        tags: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """Upload an image to GitHub and add it to the catalog on success"""
        try:
            self.configuration.require_configured()
        except ConfigurationMissing as e:
            return {"success": False, "error": str(e), "error_code": e.error_code}

        try:
            metadata = get_image_metadata(payload)
        except ValueError as e:
            logger.warning(f"Refusing upload of {filename}: {e}")
            return {"success": False, "error": str(e), "error_code": "invalid_image"}

        filename = guess_filename(filename, metadata)

        result = self.github_client.upload_image(payload, filename)
        if not result.success:
            return {
                "success": False,
                "error": f"Upload failed: {result.error}",
                "error_code": result.error_code,
            }

        record = self.catalog.create_record(
            src=result.url,
            title=title,
            description=description,
            tags=tags,
            remote_path=result.path,
        )
        logger.info(
            f"Added image {record.image_id} from {filename} "
            f"({metadata.mime_type}, {metadata.width}x{metadata.height}, {metadata.bytes_size}B)"
        )
        return {
            "success": True,
            "image": record.to_dict(),
            "mime_type": metadata.mime_type,
            "width": metadata.width,
            "height": metadata.height,
            "bytes_size": metadata.bytes_size,
        }

    def add_local_image(
        self,
        src: str,
        title: str,
        description: str = "",
        tags: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """Catalog-only add; nothing is written to GitHub"""
        record = self.catalog.create_record(src=src, title=title, description=description, tags=tags)
        return {"success": True, "image": record.to_dict()}

    def edit_image(
        self,
        image_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        record = self.catalog.update(image_id, title=title, description=description, tags=tags)
        if record is None:
            return {"success": False, "error": f"Image {image_id} not found"}
        return {"success": True, "image": record.to_dict()}

    def delete_image(self, image_id: int) -> Dict[str, Any]:
        """Remove an image from the catalog and, if stored in GitHub, from the repo.

        The catalog record goes regardless of the remote outcome; a failed
        remote delete only adds a warning.
        """
        record = self.catalog.get(image_id)
        if record is None:
            return {"success": True, "removed": False, "image_id": image_id}

        self.catalog.remove(image_id)
        response: Dict[str, Any] = {"success": True, "removed": True, "image_id": image_id}
        if not record.remote_path:
            return response

        deleted = self.github_client.delete_image(record.remote_path)
        response["remote_path"] = record.remote_path
        response["remote_deleted"] = bool(deleted)
        if not deleted:
            response["warning"] = (
                f"Image removed from the gallery but {record.remote_path} could not be deleted "
                f"from GitHub: {deleted.error}"
            )
        return response
