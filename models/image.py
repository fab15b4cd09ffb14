"""Image catalog data models"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional


@dataclass
class ImageRecord:
    """One image shown in the portfolio gallery.

    image_id, src and remote_path are fixed at creation; title, description
    and tags are editable.
    """
    image_id: int
    src: str
    title: str
    description: str
    tags: List[str] = field(default_factory=list)
    upload_date: date = field(default_factory=date.today)
    remote_path: Optional[str] = None  # Set only when the asset lives in GitHub

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.image_id,
            "src": self.src,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "upload_date": self.upload_date.isoformat(),
            "remote_path": self.remote_path,
        }
