"""Output title derivation.

- TikTok: "TikTok by <Author> - <Timestamp>"
- YouTube: "<Video Title> - <Author> - <Timestamp>"
- Local file or other URL: "<Workflow Name> - <Timestamp>"
"""

import re
from datetime import datetime
from typing import Optional

from ai_toolbox.executor.schemas import InputResult

TIKTOK_URL_PATTERN = re.compile(r"tiktok\.com/", re.IGNORECASE)
YOUTUBE_URL_PATTERN = re.compile(r"(?:youtube\.com/|youtu\.be/)", re.IGNORECASE)


def filename_timestamp(now: Optional[datetime] = None) -> str:
    """Filesystem-safe timestamp, e.g. 2024-05-01T13-45-09."""
    return (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")


def detect_platform(url: str) -> Optional[str]:
    if TIKTOK_URL_PATTERN.search(url):
        return "tiktok"
    if YOUTUBE_URL_PATTERN.search(url):
        return "youtube"
    return None


def default_title(workflow_name: str, now: Optional[datetime] = None) -> str:
    return f"{workflow_name} - {filename_timestamp(now)}"


def derive_platform_title(
    input_result: InputResult,
    workflow_name: str,
    now: Optional[datetime] = None,
) -> str:
    """Title for output produced from a transcription input."""
    timestamp = filename_timestamp(now)
    if not input_result.source_url:
        return f"{workflow_name} - {timestamp}"

    metadata = input_result.metadata
    platform = detect_platform(input_result.source_url)
    if platform == "tiktok":
        return f"TikTok by {metadata.uploader or 'Unknown'} - {timestamp}"
    if platform == "youtube":
        return f"{metadata.title or 'Video'} - {metadata.uploader or 'Unknown'} - {timestamp}"
    return f"{workflow_name} - {timestamp}"
