"""Configuration tools for the portfolio gallery server"""

from mcp.server.fastmcp import FastMCP


def register_configuration_tools(
    mcp: FastMCP,
    configuration
):
    """Register GitHub settings tools with the MCP server"""

    @mcp.tool()
    def get_github_config() -> dict:
        """Get the current GitHub image store settings.

        Returns owner, repository, the masked token, whether the store is
        configured, and where each value came from ("injected", "saved" or
        "missing"). Injected values come from GALLERY_GITHUB_TOKEN,
        GALLERY_GITHUB_OWNER and GALLERY_GITHUB_REPO and take precedence.
        """
        return configuration.load_form()

    @mcp.tool()
    def set_github_config(token: str, owner: str, repo: str) -> dict:
        """Save GitHub settings used for image uploads.

        All three fields are required. Create a token at
        github.com/settings/tokens with repo permissions. Settings are stored
        unencrypted in the user config directory and survive restarts.

        Args:
            token: GitHub personal access token
            owner: GitHub username or organization
            repo: Repository that stores the uploaded images
        """
        return configuration.save_form(token, owner, repo)

    @mcp.tool()
    def github_status() -> dict:
        """Check whether uploads are possible right now."""
        configured = configuration.is_configured()
        return {
            "configured": configured,
            "message": "Ready to upload" if configured else "Configure GitHub settings before uploading",
        }
