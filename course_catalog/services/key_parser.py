"""Filename conventions for the course bucket.

Object keys follow ``{course}/{folder}/{filename}`` where ``filename`` is
``{title}[.{lang}].{ext}``.  Everything here is pure string handling.
"""

from dataclasses import dataclass
from enum import Enum

from course_catalog.services.subtitles import SubtitleFormat

DEFAULT_LANGUAGE = "en"


class AssetRole(str, Enum):
    VIDEO = "video"
    SUBTITLE = "subtitle"
    TRANSCRIPT = "transcript"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FolderClass:
    role: AssetRole
    # None for the generic subtitle folders; sniff the extension instead
    subtitle_format: SubtitleFormat | None = None


_FOLDERS: dict[str, FolderClass] = {
    "video": FolderClass(AssetRole.VIDEO),
    "vtt": FolderClass(AssetRole.SUBTITLE, SubtitleFormat.VTT),
    "srt": FolderClass(AssetRole.SUBTITLE, SubtitleFormat.SRT),
    "subtitles": FolderClass(AssetRole.SUBTITLE),
    "subs": FolderClass(AssetRole.SUBTITLE),
    "txt": FolderClass(AssetRole.TRANSCRIPT),
}

_UNKNOWN = FolderClass(AssetRole.UNKNOWN)


def _is_language_tag(segment: str) -> bool:
    return 2 <= len(segment) <= 3


def extract_language_code(filename: str) -> str:
    """Return the segment between the last two dots if it looks like a
    language tag (2-3 characters), otherwise ``"en"``.

    ``"lesson1.es.vtt"`` -> ``"es"``; ``"lesson1.vtt"`` -> ``"en"``.
    """
    parts = filename.split(".")
    if len(parts) >= 2 and _is_language_tag(parts[-2]):
        return parts[-2]
    return DEFAULT_LANGUAGE


def classify_folder(folder: str) -> FolderClass:
    """Map a folder name (case-insensitive) to the role of the files in it."""
    return _FOLDERS.get(folder.lower(), _UNKNOWN)


def subtitle_format_from_extension(filename: str) -> SubtitleFormat | None:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    try:
        return SubtitleFormat(ext)
    except ValueError:
        return None


def base_name(filename: str) -> str:
    """Strip the extension and an optional trailing language tag.

    ``"COMM 200 1.es.vtt"`` -> ``"COMM 200 1"``.  A title whose last dotted
    token is itself 2-3 characters long (``"intro.v2.mp4"``) loses that token
    too; the naming convention has no way to tell the two apart.
    """
    stem = filename.rsplit(".", 1)[0] if "." in filename else filename
    if "." in stem:
        head, tail = stem.rsplit(".", 1)
        if _is_language_tag(tail):
            return head
    return stem


def split_key(key: str) -> tuple[str, str, str] | None:
    """Split an object key into ``(course, folder, filename)``.

    Returns None for keys that are not at least three levels deep and for
    folder placeholder objects (``"course/video/"``).
    """
    parts = key.split("/")
    if len(parts) < 3 or not parts[2]:
        return None
    return parts[0], parts[1], parts[2]
