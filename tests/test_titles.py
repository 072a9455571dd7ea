"""Tests for output title derivation."""

from datetime import datetime

import pytest

from ai_toolbox.executor.schemas import InputResult, SourceMetadata
from ai_toolbox.executor.titles import (
    default_title,
    derive_platform_title,
    detect_platform,
    filename_timestamp,
)

NOW = datetime(2024, 5, 1, 13, 45, 9)


def _input(url, **metadata) -> InputResult:
    return InputResult(audio_file_path="/a.mp3", source_url=url, metadata=SourceMetadata(**metadata))


def test_filename_timestamp() -> None:
    assert filename_timestamp(NOW) == "2024-05-01T13-45-09"
    assert default_title("Flow", NOW) == "Flow - 2024-05-01T13-45-09"


@pytest.mark.parametrize(
    "url,platform",
    [
        ("https://www.youtube.com/watch?v=abc", "youtube"),
        ("https://youtu.be/abc", "youtube"),
        ("https://www.tiktok.com/@me/video/1", "tiktok"),
        ("https://vm.tiktok.com/ZM123/", "tiktok"),
        ("https://vimeo.com/1", None),
    ],
)
def test_detect_platform(url, platform) -> None:
    assert detect_platform(url) == platform


def test_youtube_title() -> None:
    title = derive_platform_title(
        _input("https://youtu.be/x", title="Talk", uploader="Ada"), "Flow", NOW
    )
    assert title == "Talk - Ada - 2024-05-01T13-45-09"


def test_youtube_title_falls_back_when_metadata_missing() -> None:
    title = derive_platform_title(_input("https://youtube.com/watch?v=x"), "Flow", NOW)
    assert title == "Video - Unknown - 2024-05-01T13-45-09"


def test_tiktok_title() -> None:
    title = derive_platform_title(
        _input("https://www.tiktok.com/@ada/video/1", uploader="ada"), "Flow", NOW
    )
    assert title == "TikTok by ada - 2024-05-01T13-45-09"


def test_local_file_and_unknown_platform_use_workflow_name() -> None:
    assert derive_platform_title(_input(None), "Flow", NOW) == "Flow - 2024-05-01T13-45-09"
    assert (
        derive_platform_title(_input("https://vimeo.com/1"), "Flow", NOW)
        == "Flow - 2024-05-01T13-45-09"
    )
