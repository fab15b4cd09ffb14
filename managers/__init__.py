"""Manager classes for the portfolio gallery server"""

from managers.catalog import ImageCatalog
from managers.configuration_bridge import ConfigurationBridge
from managers.credential_store import CredentialStore
from managers.gallery_manager import GalleryManager

__all__ = ["ImageCatalog", "ConfigurationBridge", "CredentialStore", "GalleryManager"]
