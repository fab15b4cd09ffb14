"""In-memory image catalog rendered by the gallery admin"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from models.image import ImageRecord

logger = logging.getLogger("Gallery_Server")

RECENT_UPLOAD_DAYS = 7


def seed_images() -> List[ImageRecord]:
    """Built-in records the catalog starts from on every process start"""
    return [
        ImageRecord(
            image_id=1,
            src="https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=400&h=300&fit=crop",
            title="Mystical Forest",
            description="A dreamy forest scene with ethereal lighting",
            tags=["nature", "forest", "mystical"],
            upload_date=date(2024, 1, 15),
        ),
        ImageRecord(
            image_id=2,
            src="https://images.unsplash.com/photo-1519904981063-b0cf448d479e?w=400&h=300&fit=crop",
            title="Cosmic Dreams",
            description="Stars and galaxies in perfect harmony",
            tags=["space", "cosmic", "dreams"],
            upload_date=date(2024, 1, 10),
        ),
    ]


def parse_tags(text: str) -> List[str]:
    """Split comma-separated tag input, keeping order and duplicates"""
    return [tag.strip() for tag in text.split(",") if tag.strip()]


class ImageCatalog:
    """Ordered collection of image records, held in process memory only"""

    def __init__(self, images: Optional[Sequence[ImageRecord]] = None):
        self._images: List[ImageRecord] = []
        for record in (seed_images() if images is None else images):
            self.add(record)
        logger.info(f"Initialized ImageCatalog with {len(self._images)} images")

    def __len__(self) -> int:
        return len(self._images)

    def list_images(self) -> List[ImageRecord]:
        return list(self._images)

    def get(self, image_id: int) -> Optional[ImageRecord]:
        for record in self._images:
            if record.image_id == image_id:
                return record
        return None

    def next_id(self) -> int:
        """One past the highest id in use; an empty catalog starts at 1"""
        if not self._images:
            return 1
        return max(record.image_id for record in self._images) + 1

    def add(self, record: ImageRecord) -> ImageRecord:
        if self.get(record.image_id) is not None:
            raise ValueError(f"Image id {record.image_id} is already in the catalog")
        self._images.append(record)
        logger.debug(f"Added image {record.image_id} ({record.title})")
        return record

    def create_record(
        self,
        src: str,
        title: str,
        description: str = "",
        tags: Optional[Sequence[str]] = None,
        remote_path: Optional[str] = None,
        upload_date: Optional[date] = None,
    ) -> ImageRecord:
        """Build a record with the next free id and append it"""
        record = ImageRecord(
            image_id=self.next_id(),
            src=src,
            title=title,
            description=description,
            tags=list(tags or []),
            upload_date=upload_date or date.today(),
            remote_path=remote_path,
        )
        return self.add(record)

    def remove(self, image_id: int) -> bool:
        """Drop the record with this id; unknown ids are a no-op"""
        remaining = [record for record in self._images if record.image_id != image_id]
        removed = len(remaining) != len(self._images)
        self._images = remaining
        if removed:
            logger.debug(f"Removed image {image_id}")
        return removed

    def update(
        self,
        image_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> Optional[ImageRecord]:
        """Replace the editable fields of a record in place"""
        record = self.get(image_id)
        if record is None:
            return None
        if title is not None:
            record.title = title
        if description is not None:
            record.description = description
        if tags is not None:
            record.tags = list(tags)
        return record

    def stats(self, today: Optional[date] = None) -> Dict[str, int]:
        """Counts shown on the admin dashboard"""
        today = today or date.today()
        cutoff = today - timedelta(days=RECENT_UPLOAD_DAYS)
        return {
            "total_images": len(self._images),
            "recent_uploads": sum(1 for record in self._images if record.upload_date >= cutoff),
            "categories": len({tag for record in self._images for tag in record.tags}),
        }
