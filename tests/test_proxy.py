"""Unit tests for subtitle lookup and serving."""

import pytest

from course_catalog.exceptions import NotFoundError, StoreError
from course_catalog.services.proxy import SubtitleProxy, candidate_keys
from course_catalog.services.subtitles import SubtitleFormat
from tests.fakes import FakeStore


class TestCandidateKeys:
    """Tests for the folder probing order."""

    def test_vtt_order(self):
        keys = list(candidate_keys("c", SubtitleFormat.VTT, "a.en.vtt"))
        assert keys[:5] == [
            "c/vtt/a.en.vtt",
            "c/Vtt/a.en.vtt",
            "c/VTT/a.en.vtt",
            "c/Subtitles/a.en.vtt",
            "c/subtitles/a.en.vtt",
        ]
        assert "c/subs/a.en.vtt" in keys

    def test_no_duplicates(self):
        keys = list(candidate_keys("c", SubtitleFormat.SRT, "a.srt"))
        assert len(keys) == len(set(keys))


class TestSubtitleProxy:
    """Tests for SubtitleProxy.fetch."""

    @pytest.mark.asyncio
    async def test_serves_vtt_unchanged(self):
        body = "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHi\n"
        proxy = SubtitleProxy(FakeStore({"c/VTT/a.en.vtt": body}))

        assert await proxy.fetch("c", SubtitleFormat.VTT, "a.en.vtt") == body

    @pytest.mark.asyncio
    async def test_converts_srt(self):
        store = FakeStore({"c/srt/a.es.srt": "1\n00:00:01,000 --> 00:00:02,000\nHola\n"})
        proxy = SubtitleProxy(store)

        out = await proxy.fetch("c", SubtitleFormat.SRT, "a.es.srt")

        assert out.startswith("WEBVTT\n\n")
        assert "00:00:01.000 --> 00:00:02.000\nHola" in out

    @pytest.mark.asyncio
    async def test_stops_at_first_hit(self):
        store = FakeStore({"c/Subtitles/a.vtt": "WEBVTT\n\n", "c/subs/a.vtt": "other"})
        proxy = SubtitleProxy(store)

        key, _ = await proxy.locate("c", SubtitleFormat.VTT, "a.vtt")

        assert key == "c/Subtitles/a.vtt"
        assert store.get_calls[-1] == "c/Subtitles/a.vtt"
        assert "c/subs/a.vtt" not in store.get_calls

    @pytest.mark.asyncio
    async def test_srt_in_generic_folder_requested_as_vtt_is_converted(self):
        store = FakeStore({"c/subs/a.srt": "1\n00:00:01,000 --> 00:00:02,000\nHi\n"})
        proxy = SubtitleProxy(store)

        out = await proxy.fetch("c", SubtitleFormat.VTT, "a.srt")

        assert "00:00:01.000" in out

    @pytest.mark.asyncio
    async def test_missing_everywhere(self):
        store = FakeStore()
        proxy = SubtitleProxy(store)

        with pytest.raises(NotFoundError):
            await proxy.fetch("c", SubtitleFormat.VTT, "a.vtt")
        assert store.get_calls == list(candidate_keys("c", SubtitleFormat.VTT, "a.vtt"))

    @pytest.mark.asyncio
    async def test_read_failure_propagates(self):
        store = FakeStore({"c/Vtt/a.vtt": "WEBVTT\n\n"})
        store.fail_reads.add("c/vtt/a.vtt")
        proxy = SubtitleProxy(store)

        with pytest.raises(StoreError):
            await proxy.fetch("c", SubtitleFormat.VTT, "a.vtt")
        assert store.get_calls == ["c/vtt/a.vtt"]
