import logging
from typing import Callable, Iterator, Protocol

from course_catalog.exceptions import NotFoundError
from course_catalog.services.key_parser import subtitle_format_from_extension
from course_catalog.services.subtitles import SubtitleFormat, convert

logger = logging.getLogger(__name__)

# Folder spellings tried in order: the format's own folder, then the
# generic subtitle folders, each in the casings seen in uploaded buckets.
FOLDER_CANDIDATES: tuple[Callable[[SubtitleFormat], str], ...] = (
    lambda fmt: fmt.value,
    lambda fmt: fmt.value.capitalize(),
    lambda fmt: fmt.value.upper(),
    lambda fmt: "Subtitles",
    lambda fmt: "subtitles",
    lambda fmt: "subs",
    lambda fmt: "Subs",
)


class TextStore(Protocol):
    async def get_text(self, key: str) -> str: ...


def candidate_keys(course_name: str, fmt: SubtitleFormat, filename: str) -> Iterator[str]:
    seen: set[str] = set()
    for transform in FOLDER_CANDIDATES:
        key = f"{course_name}/{transform(fmt)}/{filename}"
        if key not in seen:
            seen.add(key)
            yield key


class SubtitleProxy:
    """Serves subtitle files as WebVTT, converting SRT on the way out."""

    def __init__(self, store: TextStore) -> None:
        self._store = store

    async def locate(self, course_name: str, fmt: SubtitleFormat, filename: str) -> tuple[str, str]:
        """Return ``(key, content)`` for the first candidate key that exists.

        Only a missing object moves on to the next candidate; any other
        store failure propagates.
        """
        for key in candidate_keys(course_name, fmt, filename):
            try:
                content = await self._store.get_text(key)
            except NotFoundError:
                logger.debug("Subtitle not at %s", key)
                continue
            logger.debug("Found subtitle at %s", key)
            return key, content
        raise NotFoundError(f"{fmt.value.upper()} file not found: {course_name}/{filename}")

    async def fetch(self, course_name: str, fmt: SubtitleFormat, filename: str) -> str:
        """Return the subtitle as WebVTT text."""
        key, content = await self.locate(course_name, fmt, filename)
        source = subtitle_format_from_extension(filename) or fmt
        if source is not SubtitleFormat.VTT:
            logger.info("Converting %s from %s to vtt (%d chars)", key, source.value, len(content))
        return convert(content, source, SubtitleFormat.VTT)
