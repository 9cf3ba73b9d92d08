import logging
import re
from enum import Enum

from course_catalog.exceptions import ConversionError

logger = logging.getLogger(__name__)

VTT_HEADER = "WEBVTT"

_TAG_RE = re.compile(r"<[^>]*>")


class SubtitleFormat(str, Enum):
    VTT = "vtt"
    SRT = "srt"

    @property
    def media_type(self) -> str:
        return "text/vtt" if self is SubtitleFormat.VTT else "application/x-subrip"


def _clean_text(line: str) -> str:
    return _TAG_RE.sub("", line).strip()


def _srt_block_to_vtt(block: str) -> str | None:
    """Convert one ``index / time range / text...`` block.

    Returns None when the block has no text left after cleaning.  Raises
    ConversionError when the block is too short to be a cue.
    """
    lines = [line for line in block.split("\n") if line.strip()]
    if len(lines) < 3:
        raise ConversionError(f"Expected at least 3 lines, got {len(lines)}")

    # lines[0] is the cue index; VTT cues don't need one
    time_line = lines[1].replace(",", ".")
    text_lines = [t for t in (_clean_text(line) for line in lines[2:]) if t]
    if not text_lines:
        return None
    return time_line + "\n" + "\n".join(text_lines)


def srt_to_vtt(content: str) -> str:
    """Convert SubRip text to WebVTT, skipping blocks that don't parse."""
    normalized = content.replace("\r\n", "\n").replace("\r", "\n")
    blocks = [b for b in re.split(r"\n\s*\n", normalized.strip()) if b.strip()]

    out = [VTT_HEADER, ""]
    kept = 0
    for index, block in enumerate(blocks):
        try:
            cue = _srt_block_to_vtt(block)
        except ConversionError as e:
            logger.debug("Skipping subtitle block %d: %s", index + 1, e.message)
            continue
        if cue is None:
            continue
        out.append(cue)
        out.append("")
        kept += 1

    logger.debug("Converted %d of %d SRT blocks to VTT", kept, len(blocks))
    return "\n".join(out) + "\n"


def convert(
    content: str,
    source: SubtitleFormat,
    target: SubtitleFormat = SubtitleFormat.VTT,
) -> str:
    """Convert subtitle *content* from *source* to *target* format.

    Same-format conversion returns the content unchanged.
    """
    source = SubtitleFormat(source)
    target = SubtitleFormat(target)
    if source is target:
        return content
    if source is SubtitleFormat.SRT and target is SubtitleFormat.VTT:
        return srt_to_vtt(content)
    raise ValueError(f"Unsupported subtitle conversion: {source.value} -> {target.value}")
