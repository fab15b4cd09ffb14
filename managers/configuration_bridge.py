"""Settings form backing the GitHub configuration dialog"""

import logging
from typing import Any, Dict

from github_client import ConfigurationMissing
from models.credential import Credential

logger = logging.getLogger("Gallery_Server")


class ConfigurationBridge:
    """Reads and writes the credential store on behalf of the settings form"""

    def __init__(self, credential_store):
        self.credential_store = credential_store

    def load_form(self) -> Dict[str, Any]:
        return self.credential_store.describe()

    def save_form(self, token: str, owner: str, repo: str) -> Dict[str, Any]:
        credential = Credential(token=token.strip(), owner=owner.strip(), repo=repo.strip())
        if not credential.is_complete():
            return {
                "success": False,
                "title": "Missing Information",
                "error": "Please fill in all fields",
            }

        if not self.credential_store.set(credential):
            return {
                "success": False,
                "title": "Configuration Not Saved",
                "error": f"Failed to write {self.credential_store.config_file}",
            }

        return {
            "success": True,
            "title": "Configuration Saved",
            "message": "GitHub settings have been saved successfully",
            "config": self.credential_store.describe(),
        }

    def is_configured(self) -> bool:
        return self.credential_store.is_configured()

    def require_configured(self):
        """Refuse the action before any network call if settings are incomplete"""
        if not self.credential_store.is_configured():
            logger.info("Upload refused: GitHub settings are incomplete")
            raise ConfigurationMissing(
                "GitHub is not configured. Call set_github_config with a personal access token "
                "(repo scope), the owner and the repository name first."
            )
