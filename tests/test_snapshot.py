"""Tests for reading and writing the pre-generated catalog file."""

import json
from datetime import datetime, timezone

import pytest

from course_catalog.models import Course, Snapshot, Video
from course_catalog.services.snapshot import SnapshotStorage


def _snapshot():
    video = Video(
        name="intro",
        video_url="https://signed.example/intro.mp4",
        vtt_urls={"en": "http://host/api/vtt/c/intro.en.vtt"},
        available_languages=["en"],
    )
    return Snapshot(
        generated_at=datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc),
        bucket_name="courses-bucket",
        courses=[Course("c", "c/", [video])],
    )


@pytest.mark.asyncio
async def test_write_uses_camel_case_layout(tmp_path):
    path = tmp_path / "out" / "pre-generated-urls.json"

    await SnapshotStorage.write(str(path), _snapshot())

    data = json.loads(path.read_text())
    assert data["generatedAt"] == "2026-10-01T12:00:00+00:00"
    assert data["bucketName"] == "courses-bucket"
    video = data["courses"][0]["videos"][0]
    assert video["videoUrl"] == "https://signed.example/intro.mp4"
    assert video["vttUrls"] == {"en": "http://host/api/vtt/c/intro.en.vtt"}
    assert video["availableLanguages"] == ["en"]


@pytest.mark.asyncio
async def test_read_back(tmp_path):
    path = str(tmp_path / "snap.json")
    await SnapshotStorage.write(path, _snapshot())

    snapshot = await SnapshotStorage.read(path)

    assert snapshot == _snapshot()


@pytest.mark.asyncio
async def test_reads_zulu_timestamps(tmp_path):
    path = tmp_path / "snap.json"
    path.write_text(json.dumps({
        "generatedAt": "2026-10-01T12:00:00.000Z",
        "bucketName": "b",
        "courses": [{"name": "c", "path": "c/", "videos": []}],
    }))

    snapshot = await SnapshotStorage.read(str(path))

    assert snapshot.generated_at.tzinfo is not None
    assert snapshot.courses == [Course("c", "c/", [])]


@pytest.mark.asyncio
async def test_missing_file(tmp_path):
    assert await SnapshotStorage.read(str(tmp_path / "nope.json")) is None


@pytest.mark.asyncio
async def test_corrupt_file(tmp_path):
    path = tmp_path / "snap.json"
    path.write_text("{not json")

    assert await SnapshotStorage.read(str(path)) is None


@pytest.mark.asyncio
async def test_wrong_shape_is_ignored(tmp_path):
    path = tmp_path / "snap.json"
    path.write_text(json.dumps({"generatedAt": 1700000000, "bucketName": "b", "courses": []}))

    assert await SnapshotStorage.read(str(path)) is None
