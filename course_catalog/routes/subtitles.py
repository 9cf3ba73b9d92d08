from fastapi import APIRouter, Depends, Response

from course_catalog.dependencies import get_proxy
from course_catalog.services.proxy import SubtitleProxy
from course_catalog.services.subtitles import SubtitleFormat

router = APIRouter(prefix="/api", tags=["subtitles"])

# Players load tracks cross-origin, so these are open regardless of the
# app-wide CORS settings.
SUBTITLE_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.get("/{fmt}/{course_name}/{file_name}")
async def get_subtitle(
    fmt: SubtitleFormat,
    course_name: str,
    file_name: str,
    proxy: SubtitleProxy = Depends(get_proxy),
) -> Response:
    """Serve a stored subtitle file as WebVTT.

    ``fmt`` names the folder family to search (``vtt`` or ``srt``); SRT files
    are converted before they are returned.
    """
    vtt = await proxy.fetch(course_name, fmt, file_name)
    return Response(
        content=vtt,
        media_type=SubtitleFormat.VTT.media_type,
        headers=SUBTITLE_CORS_HEADERS,
    )


@router.options("/{fmt}/{course_name}/{file_name}")
async def subtitle_preflight(fmt: SubtitleFormat, course_name: str, file_name: str) -> Response:
    return Response(status_code=200, headers=SUBTITLE_CORS_HEADERS)
