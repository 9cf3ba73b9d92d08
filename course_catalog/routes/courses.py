from fastapi import APIRouter, Depends
from pydantic import BaseModel

from course_catalog.config import Settings
from course_catalog.dependencies import get_builder, get_cache, get_settings, get_signer
from course_catalog.exceptions import BadRequestError, NotFoundError
from course_catalog.services.cache import CatalogCache
from course_catalog.services.catalog import CatalogBuilder
from course_catalog.services.signer import SignedUrlIssuer

router = APIRouter(prefix="/api", tags=["courses"])


# ------------------------------------------------------------------
# Request bodies
# ------------------------------------------------------------------


class SignUrlRequest(BaseModel):
    objectKey: str | None = None


# ------------------------------------------------------------------
# Course endpoints
# ------------------------------------------------------------------


@router.get("/courses")
async def list_courses(cache: CatalogCache = Depends(get_cache)) -> list[dict]:
    """Every course, served from the catalog cache."""
    courses = await cache.get_courses()
    return [c.to_dict() for c in courses]


@router.get("/courses/{course_name}")
async def get_course(
    course_name: str, builder: CatalogBuilder = Depends(get_builder)
) -> dict:
    """Build one course live from the bucket, bypassing the cache."""
    course = await builder.build_course(course_name)
    if course is None:
        raise NotFoundError(f"Course '{course_name}' not found")
    return course.to_dict()


@router.post("/signurl")
async def sign_url(
    body: SignUrlRequest,
    signer: SignedUrlIssuer = Depends(get_signer),
    settings: Settings = Depends(get_settings),
) -> dict:
    if not body.objectKey:
        raise BadRequestError("Object key is required")
    # Keys arrive form-encoded from the player links
    key = body.objectKey.replace("+", " ")
    url = await signer.sign(key, settings.url_expiry_seconds)
    return {"url": url}


# ------------------------------------------------------------------
# Admin / status
# ------------------------------------------------------------------


@router.post("/clear-cache")
async def clear_cache(cache: CatalogCache = Depends(get_cache)) -> dict:
    cache.clear()
    return {"message": "Cache cleared successfully"}


@router.get("/health")
async def health(
    cache: CatalogCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
) -> dict:
    return {
        "status": "OK",
        "bucket": settings.s3_bucket_name,
        "region": settings.aws_region,
        **cache.status(),
    }
