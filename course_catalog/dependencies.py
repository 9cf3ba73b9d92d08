from fastapi import Request

from course_catalog.config import Settings
from course_catalog.services.cache import CatalogCache
from course_catalog.services.catalog import CatalogBuilder
from course_catalog.services.proxy import SubtitleProxy
from course_catalog.services.signer import SignedUrlIssuer

# Everything below is wired once per process by the lifespan in main.py.


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> CatalogCache:
    return request.app.state.cache


def get_builder(request: Request) -> CatalogBuilder:
    return request.app.state.builder


def get_signer(request: Request) -> SignedUrlIssuer:
    return request.app.state.signer


def get_proxy(request: Request) -> SubtitleProxy:
    return request.app.state.proxy
