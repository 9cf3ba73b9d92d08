"""Pytest configuration and fixtures for the course catalog tests."""

import os

# Settings are read at import time; set the required ones before any
# course_catalog module is imported.
os.environ.setdefault("S3_BUCKET_NAME", "test-bucket")
os.environ.setdefault("SNAPSHOT_PATH", "")
os.environ.setdefault("WARM_ON_STARTUP", "false")

import pytest  # noqa: E402

from tests.fakes import FakeClock, FakeStore  # noqa: E402


@pytest.fixture
def course_objects():
    """A small bucket with two courses and every kind of asset."""
    return {
        "COMM 200/video/COMM 200 1.mp4": "<video>",
        "COMM 200/vtt/COMM 200 1.en.vtt": "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHi\n",
        "COMM 200/srt/COMM 200 1.es.srt": "1\n00:00:01,000 --> 00:00:02,000\nHola\n",
        "COMM 200/txt/COMM 200 1.txt": "Full English transcript",
        "COMM 200/video/COMM 200 2.mp4": "<video>",
        "COMM 200/notes/readme.md": "ignored",
        "BIO 101/Video/cells.mp4": "<video>",
        "BIO 101/Subtitles/cells.fr.vtt": "WEBVTT\n\n",
    }


@pytest.fixture
def store(course_objects):
    return FakeStore(course_objects)


@pytest.fixture
def clock():
    return FakeClock()
