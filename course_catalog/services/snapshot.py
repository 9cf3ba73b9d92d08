import json
import logging
import os
from datetime import datetime

import aiofiles

from course_catalog.models import Course, Snapshot

logger = logging.getLogger(__name__)


class SnapshotStorage:
    """Read and write the pre-generated catalog file.

    Format::

        {"generatedAt": "<ISO-8601>", "bucketName": "...", "courses": [...]}
    """

    @staticmethod
    def to_dict(snapshot: Snapshot) -> dict:
        return {
            "generatedAt": snapshot.generated_at.isoformat(),
            "bucketName": snapshot.bucket_name,
            "courses": [c.to_dict() for c in snapshot.courses],
        }

    @staticmethod
    def from_dict(data: dict) -> Snapshot:
        return Snapshot(
            generated_at=datetime.fromisoformat(data["generatedAt"].replace("Z", "+00:00")),
            bucket_name=data.get("bucketName", ""),
            courses=[Course.from_dict(c) for c in data["courses"]],
        )

    @staticmethod
    async def write(path: str, snapshot: Snapshot) -> None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        async with aiofiles.open(path, "w") as f:
            await f.write(json.dumps(SnapshotStorage.to_dict(snapshot), indent=2))

    @staticmethod
    async def read(path: str) -> Snapshot | None:
        """Return the snapshot at *path*, or None if it is missing or unreadable."""
        if not os.path.exists(path):
            logger.info("No pre-generated catalog at %s", path)
            return None
        try:
            async with aiofiles.open(path) as f:
                data = json.loads(await f.read())
            return SnapshotStorage.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable catalog snapshot %s: %s", path, e)
            return None
