import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP

from github_client import GitHubContentsClient
from managers import ConfigurationBridge, CredentialStore, GalleryManager, ImageCatalog
from tools.configuration import register_configuration_tools
from tools.gallery import register_gallery_tools

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("Gallery_Server")


class AppContext:
    def __init__(self, gallery_manager: GalleryManager, configuration: ConfigurationBridge):
        self.gallery_manager = gallery_manager
        self.configuration = configuration


def build_server(
    config_file: Optional[Path] = None,
    catalog: Optional[ImageCatalog] = None,
    github_client: Optional[GitHubContentsClient] = None,
) -> FastMCP:
    """Wire the stores, the GitHub client and the tools into one server"""
    credential_store = CredentialStore(config_file=config_file)
    configuration = ConfigurationBridge(credential_store)
    github_client = github_client or GitHubContentsClient(credential_store)
    gallery_manager = GalleryManager(catalog or ImageCatalog(), github_client, configuration)

    @asynccontextmanager
    async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
        """Manage application lifecycle"""
        logger.info("Starting gallery server lifecycle...")
        if not configuration.is_configured():
            logger.warning("GitHub settings are incomplete; uploads stay disabled until set_github_config is called")
        try:
            yield AppContext(gallery_manager=gallery_manager, configuration=configuration)
        finally:
            logger.info("Shutting down gallery server")

    mcp = FastMCP("Portfolio_Gallery_Server", lifespan=app_lifespan)
    register_configuration_tools(mcp, configuration)
    register_gallery_tools(mcp, gallery_manager)
    return mcp


if __name__ == "__main__":
    config_path = os.getenv("GALLERY_CONFIG_FILE")
    build_server(config_file=Path(config_path) if config_path else None).run(transport="streamable-http")
