"""Offline catalog pre-generation.

Usage:
    course-catalog-pregenerate [--output PATH] [--base-url URL] [--expires-in SECONDS]

Builds every course exactly like the server does, but with long-lived
signatures and absolute subtitle URLs, and writes the result where the
server looks for its startup snapshot.
"""

import asyncio
import time
from datetime import datetime, timezone

import click

from course_catalog.clients import S3Client
from course_catalog.config import configure_logging, settings
from course_catalog.exceptions import CatalogError
from course_catalog.models import Snapshot
from course_catalog.services.catalog import CatalogBuilder, CatalogStore
from course_catalog.services.signer import SignedUrlIssuer
from course_catalog.services.snapshot import SnapshotStorage


async def pregenerate(
    store: CatalogStore,
    *,
    bucket_name: str,
    output: str,
    base_url: str,
    expires_in: int,
) -> Snapshot:
    """Build the full catalog and write it to *output*."""
    signer = SignedUrlIssuer(store)
    builder = CatalogBuilder(store, signer, expires_in=expires_in, subtitle_base_url=base_url)
    courses = await builder.build_all()
    snapshot = Snapshot(
        generated_at=datetime.now(timezone.utc),
        bucket_name=bucket_name,
        courses=courses,
    )
    await SnapshotStorage.write(output, snapshot)
    return snapshot


@click.command()
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Where to write the snapshot (default: SNAPSHOT_PATH).",
)
@click.option(
    "--base-url",
    default=None,
    help="Absolute URL of the serving host, used for subtitle links.",
)
@click.option(
    "--expires-in",
    type=click.IntRange(min=1),
    default=None,
    help="Signed URL lifetime in seconds (default: 24 hours).",
)
def main(output: str | None, base_url: str | None, expires_in: int | None) -> None:
    """Pre-generate signed URLs for every course in the bucket."""
    configure_logging(settings.log_level)

    output = output or settings.snapshot_path
    if not output:
        raise click.UsageError("No output path: pass --output or set SNAPSHOT_PATH.")
    base_url = base_url or settings.public_base_url or f"http://{settings.host}:{settings.port}"
    expires_in = expires_in or settings.pregenerated_url_expiry_seconds

    click.echo(f"Generating URLs for bucket {settings.s3_bucket_name} ...")
    started = time.monotonic()
    try:
        snapshot = asyncio.run(
            pregenerate(
                S3Client.from_settings(settings),
                bucket_name=settings.s3_bucket_name,
                output=output,
                base_url=base_url,
                expires_in=expires_in,
            )
        )
    except CatalogError as e:
        raise click.ClickException(e.message)
    videos = sum(len(c.videos) for c in snapshot.courses)
    click.echo(
        f"Wrote {len(snapshot.courses)} courses, {videos} videos to {output} "
        f"in {time.monotonic() - started:.1f}s"
    )


if __name__ == "__main__":
    main()
