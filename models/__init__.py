"""Data models for the portfolio gallery server"""

from models.credential import Credential
from models.image import ImageRecord
from models.remote import ContentsMetadata, ContentsUploadResponse, DeleteResult, UploadResult

__all__ = [
    "Credential",
    "ImageRecord",
    "ContentsMetadata",
    "ContentsUploadResponse",
    "DeleteResult",
    "UploadResult",
]
