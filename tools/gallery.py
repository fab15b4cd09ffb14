"""Gallery admin tools for the portfolio gallery server"""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP, Image as FastMCPImage

from image_processor import create_thumbnail, fetch_asset_bytes
from managers.catalog import parse_tags
from tools.helpers import read_upload_payload

logger = logging.getLogger("Gallery_Server")


def register_gallery_tools(
    mcp: FastMCP,
    gallery_manager
):
    """Register gallery admin tools with the MCP server"""
    catalog = gallery_manager.catalog

    @mcp.tool()
    def list_images(tag: Optional[str] = None) -> dict:
        """List images in the gallery catalog, in display order.

        The catalog lives in memory and resets to the built-in images on restart.

        Args:
            tag: Optional tag to filter by (exact match)
        """
        images = [
            record.to_dict() for record in catalog.list_images()
            if tag is None or tag in record.tags
        ]
        return {"images": images, "count": len(images)}

    @mcp.tool()
    def get_image(image_id: int) -> dict:
        """Get one image record by id."""
        record = catalog.get(image_id)
        if record is None:
            return {"error": f"Image {image_id} not found"}
        return record.to_dict()

    @mcp.tool()
    def gallery_stats() -> dict:
        """Dashboard counts: total images, uploads in the last 7 days, distinct tags."""
        return catalog.stats()

    @mcp.tool()
    def upload_image(
        title: str,
        description: str = "",
        tags: str = "",
        file_path: Optional[str] = None,
        content_base64: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> dict:
        """Upload an image to the GitHub store and add it to the gallery.

        Requires GitHub settings (see set_github_config); without them the
        upload is refused before anything is sent. Each upload creates a new
        file uploaded-images/<timestamp>-<filename> in the repository, so
        retrying a failed upload never overwrites anything.

        Args:
            title: Display title
            description: Display description
            tags: Comma-separated tags (e.g. "nature, forest")
            file_path: Local path of the image to upload
            content_base64: Image bytes as base64 (alternative to file_path)
            filename: Name to store under; defaults to the file's name
        """
        try:
            payload, resolved_name = read_upload_payload(file_path, content_base64, filename)
        except ValueError as e:
            return {"success": False, "error": str(e), "error_code": "invalid_input"}

        try:
            return gallery_manager.upload_image(
                payload,
                resolved_name,
                title=title,
                description=description,
                tags=parse_tags(tags),
            )
        except Exception as e:
            logger.exception("Upload of %s failed", resolved_name)
            return {"success": False, "error": str(e)}

    @mcp.tool()
    def add_image_url(title: str, src: str, description: str = "", tags: str = "") -> dict:
        """Add an image that is already hosted elsewhere; nothing is uploaded.

        Args:
            title: Display title
            src: Public URL of the image
            description: Display description
            tags: Comma-separated tags
        """
        return gallery_manager.add_local_image(src, title, description=description, tags=parse_tags(tags))

    @mcp.tool()
    def edit_image(
        image_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[str] = None,
    ) -> dict:
        """Edit the title, description or tags of an image.

        The id, URL and stored GitHub path cannot be changed. Omitted fields
        are left as they are; tags replace the whole tag list.
        """
        return gallery_manager.edit_image(
            image_id,
            title=title,
            description=description,
            tags=parse_tags(tags) if tags is not None else None,
        )

    @mcp.tool()
    def delete_image(image_id: int) -> dict:
        """Delete an image from the gallery.

        The image always leaves the catalog. If it was uploaded to GitHub the
        file is deleted there too; when that fails the response carries a
        warning and remote_deleted=false instead of an error.
        """
        return gallery_manager.delete_image(image_id)

    @mcp.tool()
    def view_image(image_id: int, max_dim: int = 512):
        """View a gallery image inline as a JPEG thumbnail.

        Args:
            image_id: Image id from list_images
            max_dim: Maximum thumbnail dimension in pixels
        """
        record = catalog.get(image_id)
        if record is None:
            return {"error": f"Image {image_id} not found"}

        try:
            image_bytes = fetch_asset_bytes(record.src)
            thumbnail = create_thumbnail(image_bytes, max_dim=min(max_dim, 1024), quality=70)
            logger.info(f"view_image success: image_id={image_id} src={len(image_bytes)}B thumb={len(thumbnail)}B")
            return FastMCPImage(data=thumbnail, format="jpeg")
        except Exception as e:
            logger.exception(f"Failed to build preview for image {image_id}")
            return {"error": f"Failed to process image: {str(e)}"}
