"""Tests for the offline pre-generation job."""

import json

import pytest
from click.testing import CliRunner

from course_catalog import pregenerate as pregen_module
from course_catalog.pregenerate import main, pregenerate
from course_catalog.services.snapshot import SnapshotStorage


@pytest.mark.asyncio
async def test_pregenerate_writes_absolute_long_lived_urls(tmp_path, store):
    output = str(tmp_path / "pre-generated-urls.json")

    snapshot = await pregenerate(
        store,
        bucket_name="courses-bucket",
        output=output,
        base_url="https://courses.example",
        expires_in=86400,
    )

    assert {c.name for c in snapshot.courses} == {"BIO 101", "COMM 200"}
    assert all(expires == 86400 for _, expires in store.presign_calls)
    loaded = await SnapshotStorage.read(output)
    assert loaded == snapshot
    bio = next(c for c in loaded.courses if c.name == "BIO 101")
    assert bio.videos[0].vtt_urls["fr"] == "https://courses.example/api/vtt/BIO%20101/cells.fr.vtt"


class TestCli:
    """Tests for the click entry point."""

    def test_writes_snapshot(self, tmp_path, store, monkeypatch):
        monkeypatch.setattr(pregen_module.S3Client, "from_settings", classmethod(lambda cls, s: store))
        output = tmp_path / "snap.json"

        result = CliRunner().invoke(
            main, ["--output", str(output), "--base-url", "https://host.example"]
        )

        assert result.exit_code == 0, result.output
        assert "Wrote 2 courses, 3 videos" in result.output
        data = json.loads(output.read_text())
        assert data["bucketName"] == "test-bucket"
        assert {expires for _, expires in store.presign_calls} == {86400}

    def test_bucket_failure_exits_non_zero(self, tmp_path, store, monkeypatch):
        store.fail_root_listing = True
        monkeypatch.setattr(pregen_module.S3Client, "from_settings", classmethod(lambda cls, s: store))

        result = CliRunner().invoke(main, ["--output", str(tmp_path / "snap.json")])

        assert result.exit_code == 1
        assert "bucket unreachable" in result.output
        assert not (tmp_path / "snap.json").exists()

    def test_requires_an_output_path(self, monkeypatch, store):
        monkeypatch.setattr(pregen_module.settings, "snapshot_path", "")
        monkeypatch.setattr(pregen_module.S3Client, "from_settings", classmethod(lambda cls, s: store))

        result = CliRunner().invoke(main, [])

        assert result.exit_code == 2
        assert "No output path" in result.output
