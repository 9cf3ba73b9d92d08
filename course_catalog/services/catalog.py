import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import quote

from course_catalog.exceptions import CatalogError
from course_catalog.models import Course, Video
from course_catalog.services.key_parser import (
    DEFAULT_LANGUAGE,
    AssetRole,
    base_name,
    classify_folder,
    extract_language_code,
    split_key,
    subtitle_format_from_extension,
)
from course_catalog.services.signer import SignedUrlIssuer
from course_catalog.services.subtitles import SubtitleFormat

logger = logging.getLogger(__name__)


class CatalogStore(Protocol):
    async def list_prefixes(self) -> list[str]: ...

    async def list_keys(self, prefix: str) -> list[str]: ...

    async def get_text(self, key: str) -> str: ...


@dataclass
class AssetGroup:
    """Every object sharing one base name within a course."""

    video: str | None = None
    vtt: dict[str, str] = field(default_factory=dict)
    srt: dict[str, str] = field(default_factory=dict)
    txt: dict[str, str] = field(default_factory=dict)

    def subtitles(self, fmt: SubtitleFormat) -> dict[str, str]:
        return self.vtt if fmt is SubtitleFormat.VTT else self.srt


def group_keys(keys: list[str]) -> dict[str, AssetGroup]:
    """Group a course listing by base name in a single pass.

    Keys in unrecognized folders, or subtitle files whose format can't be
    determined, are logged and skipped.
    """
    groups: dict[str, AssetGroup] = {}
    for key in keys:
        parts = split_key(key)
        if parts is None:
            continue
        _course, folder, filename = parts

        folder_class = classify_folder(folder)
        if folder_class.role is AssetRole.UNKNOWN:
            logger.debug("Ignoring %s: unknown folder %r", key, folder)
            continue

        fmt = None
        if folder_class.role is AssetRole.SUBTITLE:
            fmt = folder_class.subtitle_format or subtitle_format_from_extension(filename)
            if fmt is None:
                logger.warning("Ignoring %s: unknown subtitle format", key)
                continue

        group = groups.setdefault(base_name(filename), AssetGroup())
        if folder_class.role is AssetRole.VIDEO:
            group.video = key
        elif fmt is not None:
            group.subtitles(fmt)[extract_language_code(filename)] = key
        else:
            group.txt[extract_language_code(filename)] = key
    return groups


class CatalogBuilder:
    """Turns bucket listings into ``Course`` records.

    Video and transcript objects are signed through the issuer.  Subtitles
    are referenced through the subtitle proxy endpoints instead, so the proxy
    can convert SRT to VTT when the player asks for them.
    """

    def __init__(
        self,
        store: CatalogStore,
        signer: SignedUrlIssuer,
        *,
        expires_in: int,
        subtitle_base_url: str = "",
    ) -> None:
        self._store = store
        self._signer = signer
        self.expires_in = expires_in
        self.subtitle_base_url = subtitle_base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Courses
    # ------------------------------------------------------------------
    async def list_course_names(self) -> list[str]:
        prefixes = await self._store.list_prefixes()
        return [p[:-1] if p.endswith("/") else p for p in prefixes]

    async def build_all(self) -> list[Course]:
        """Build every course concurrently. Courses that fail are left out."""
        names = await self.list_course_names()
        logger.info("Building catalog for %d courses", len(names))
        results = await asyncio.gather(*(self.build_course(name) for name in names))
        courses = [c for c in results if c is not None]
        if len(courses) < len(names):
            logger.warning("%d of %d courses failed to build", len(names) - len(courses), len(names))
        return courses

    async def build_course(self, course_name: str) -> Course | None:
        """Build one course from a fresh listing, or None if it can't be listed."""
        try:
            keys = await self._store.list_keys(f"{course_name}/")
            groups = group_keys(keys)
            videos = await asyncio.gather(
                *(
                    self._build_video(course_name, name, group)
                    for name, group in groups.items()
                    if group.video is not None
                )
            )
        except CatalogError as e:
            logger.error("Failed to build course %r: %s", course_name, e.message)
            return None
        except Exception:
            logger.exception("Unexpected error building course %r", course_name)
            return None

        built = [v for v in videos if v is not None]
        logger.info("Course %r: %d videos from %d objects", course_name, len(built), len(keys))
        return Course(name=course_name, path=f"{course_name}/", videos=built)

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------
    async def _build_video(self, course_name: str, name: str, group: AssetGroup) -> Video | None:
        video_url, txt_urls, transcript = await asyncio.gather(
            self._signer.sign(group.video, self.expires_in),
            self._sign_transcripts(group.txt),
            self._fetch_transcript(group.txt.get(DEFAULT_LANGUAGE)),
            return_exceptions=True,
        )
        if isinstance(video_url, CatalogError):
            logger.error("Dropping video %r in %r: %s", name, course_name, video_url.message)
            return None
        # the helpers swallow CatalogError, anything else is a bug
        for result in (video_url, txt_urls, transcript):
            if isinstance(result, BaseException):
                raise result

        video = Video(name=name, video_url=video_url, txt_urls=txt_urls, transcript=transcript)
        for fmt in (SubtitleFormat.VTT, SubtitleFormat.SRT):
            urls = video.vtt_urls if fmt is SubtitleFormat.VTT else video.srt_urls
            for lang, key in group.subtitles(fmt).items():
                urls[lang] = self.subtitle_url(course_name, fmt, key.rsplit("/", 1)[-1])
                video.available_languages.append(lang)
        return video

    def subtitle_url(self, course_name: str, fmt: SubtitleFormat, filename: str) -> str:
        """Reference to the proxy endpoint serving this subtitle file."""
        return (
            f"{self.subtitle_base_url}/api/{fmt.value}/"
            f"{quote(course_name, safe='')}/{quote(filename, safe='')}"
        )

    async def _sign_transcripts(self, txt: dict[str, str]) -> dict[str, str]:
        langs = list(txt)
        results = await asyncio.gather(
            *(self._signer.sign(txt[lang], self.expires_in) for lang in langs),
            return_exceptions=True,
        )
        urls: dict[str, str] = {}
        for lang, result in zip(langs, results):
            if isinstance(result, CatalogError):
                logger.warning("Skipping transcript URL %s: %s", txt[lang], result.message)
            elif isinstance(result, BaseException):
                raise result
            else:
                urls[lang] = result
        return urls

    async def _fetch_transcript(self, key: str | None) -> str:
        if key is None:
            return ""
        try:
            return await self._store.get_text(key)
        except CatalogError as e:
            logger.warning("Failed to load transcript %s: %s", key, e.message)
            return ""
