"""Credential store for the GitHub image backend"""

import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from models.credential import Credential

logger = logging.getLogger("Gallery_Server")

CREDENTIAL_FIELDS = ("token", "owner", "repo")

# Injected values win over anything saved through the settings form
ENV_VARS = {
    "token": "GALLERY_GITHUB_TOKEN",
    "owner": "GALLERY_GITHUB_OWNER",
    "repo": "GALLERY_GITHUB_REPO",
}


def get_config_dir() -> Path:
    """Get platform-specific config directory for gallery settings.

    Returns:
        Windows: %APPDATA%/portfolio-gallery
        Mac: ~/Library/Application Support/portfolio-gallery
        Linux: ~/.config/portfolio-gallery
    """
    system = platform.system()
    if system == "Windows":
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata) / "portfolio-gallery"
        return Path.home() / "AppData" / "Roaming" / "portfolio-gallery"
    elif system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "portfolio-gallery"
    else:
        return Path.home() / ".config" / "portfolio-gallery"


def get_config_file() -> Path:
    """Get path to the saved GitHub settings file."""
    return get_config_dir() / "github_config.json"


def load_injected_values() -> Dict[str, str]:
    """Read injected credential values from the environment"""
    values = {}
    for name, env_var in ENV_VARS.items():
        value = os.getenv(env_var)
        if value:
            values[name] = value
    return values


class CredentialStore:
    """Resolves the GitHub credential with precedence: injected > saved.

    Each field falls back independently, so a deployment can inject the
    owner and repository while the token is entered through the settings
    form.
    """

    def __init__(self, config_file: Optional[Path] = None, injected: Optional[Mapping[str, str]] = None):
        self.config_file = Path(config_file) if config_file else get_config_file()
        self._injected = dict(injected) if injected is not None else load_injected_values()

    def _load_saved(self) -> Dict[str, Any]:
        if not self.config_file.exists():
            return {}
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
                return config if isinstance(config, dict) else {}
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load GitHub settings from {self.config_file}: {e}")
            return {}

    def _resolve(self) -> Dict[str, Dict[str, str]]:
        saved = self._load_saved()
        resolved = {}
        for name in CREDENTIAL_FIELDS:
            injected_value = self._injected.get(name)
            saved_value = saved.get(name)
            if injected_value:
                resolved[name] = {"value": injected_value, "source": "injected"}
            elif isinstance(saved_value, str) and saved_value:
                resolved[name] = {"value": saved_value, "source": "saved"}
            else:
                resolved[name] = {"value": "", "source": "missing"}
        return resolved

    def get(self) -> Optional[Credential]:
        """Return the credential, or None if any field is missing"""
        resolved = self._resolve()
        credential = Credential(
            token=resolved["token"]["value"],
            owner=resolved["owner"]["value"],
            repo=resolved["repo"]["value"],
        )
        return credential if credential.is_complete() else None

    def set(self, credential: Credential) -> bool:
        """Persist all three fields, overwriting previous values.

        No validation happens here; an unusable token only shows up on the
        next request. Returns False if the settings file could not be written.
        """
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            existing = self._load_saved()
            existing.update({
                "token": credential.token,
                "owner": credential.owner,
                "repo": credential.repo,
            })
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(existing, f, indent=2)
            logger.info(f"Saved GitHub settings to {self.config_file}")
            return True
        except (IOError, OSError) as e:
            logger.error(f"Failed to save GitHub settings to {self.config_file}: {e}")
            return False

    def is_configured(self) -> bool:
        return self.get() is not None

    def describe(self) -> Dict[str, Any]:
        """Status for the settings form, with the token masked"""
        resolved = self._resolve()
        masked = Credential(token=resolved["token"]["value"], owner="", repo="").masked_token()
        return {
            "configured": all(resolved[name]["value"] for name in CREDENTIAL_FIELDS),
            "token": masked,
            "owner": resolved["owner"]["value"],
            "repo": resolved["repo"]["value"],
            "sources": {name: resolved[name]["source"] for name in CREDENTIAL_FIELDS},
            "config_file": str(self.config_file),
        }
