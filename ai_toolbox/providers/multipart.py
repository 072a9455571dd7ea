"""multipart/form-data encoding for audio transcription uploads.

The body is assembled by hand rather than through httpx's `files=` support.
Part order and bytes are fixed; no whitespace beyond what is shown. Layout:

    --<boundary>\\r\\n
    Content-Disposition: form-data; name="file"; filename="<name>"\\r\\n
    Content-Type: application/octet-stream\\r\\n\\r\\n
    <file bytes>\\r\\n
    (one part per extra field)
    response_format part
    language part (optional)
    timestamp_granularities[] part (segment/word only)
    --<boundary>--\\r\\n
"""

import logging
import secrets
import string
from pathlib import Path
from typing import NamedTuple, Optional, Sequence, Union

from ai_toolbox.errors import ValidationError
from ai_toolbox.providers.schemas import TimestampGranularity

logger = logging.getLogger(__name__)

_BOUNDARY_ALPHABET = string.ascii_lowercase + string.digits


class FormField(NamedTuple):
    """A plain text form field (e.g. the OpenAI `model` field)."""

    name: str
    value: str


class PreparedFormData(NamedTuple):
    boundary: str
    body: bytes
    file_name: str


def _text_part(boundary: str, name: str, value: str) -> bytes:
    return (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
        f"{value}\r\n"
    ).encode("utf-8")


def build_body(
    boundary: str,
    file_bytes: bytes,
    file_name: str,
    granularity: Union[TimestampGranularity, str] = TimestampGranularity.DISABLED,
    language: Optional[str] = None,
    extra_fields: Sequence[FormField] = (),
) -> bytes:
    """Build a byte-exact multipart/form-data body for a transcription upload.

    Args:
        boundary: Multipart boundary (without the leading dashes)
        file_bytes: Raw audio bytes
        file_name: Filename reported in the file part
        granularity: Timestamp granularity; anything other than 'disabled'
            switches response_format to verbose_json and requests segments;
            word also requests word timings
        language: Optional language code
        extra_fields: Provider-specific fields placed right after the file part

    Returns:
        The complete request body
    """
    granularity = TimestampGranularity(granularity)

    parts: list[bytes] = [
        (
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="file"; filename="{file_name}"\r\n'
            f"Content-Type: application/octet-stream\r\n\r\n"
        ).encode("utf-8"),
        bytes(file_bytes),
        b"\r\n",
    ]

    for field in extra_fields:
        parts.append(_text_part(boundary, field.name, field.value))

    response_format = (
        "json" if granularity == TimestampGranularity.DISABLED else "verbose_json"
    )
    parts.append(_text_part(boundary, "response_format", response_format))

    if language:
        parts.append(_text_part(boundary, "language", language))

    # Segment chunks are always requested; word adds a second granularity.
    if granularity != TimestampGranularity.DISABLED:
        parts.append(_text_part(boundary, "timestamp_granularities[]", "segment"))
    if granularity == TimestampGranularity.WORD:
        parts.append(_text_part(boundary, "timestamp_granularities[]", "word"))

    parts.append(f"--{boundary}--\r\n".encode("utf-8"))
    return b"".join(parts)


def generate_boundary() -> str:
    """Random boundary string for one request."""
    suffix = "".join(secrets.choice(_BOUNDARY_ALPHABET) for _ in range(16))
    return f"----FormBoundary{suffix}"


def content_type_header(boundary: str) -> str:
    return f"multipart/form-data; boundary={boundary}"


def extract_file_name(file_path: str, default: str = "audio.mp3") -> str:
    """Last path component, accepting both / and \\ separators."""
    name = file_path.replace("\\", "/").rsplit("/", 1)[-1]
    return name or default


def prepare_audio_form_data(
    audio_file_path: str,
    *,
    granularity: Union[TimestampGranularity, str] = TimestampGranularity.DISABLED,
    language: Optional[str] = None,
    extra_fields: Sequence[FormField] = (),
) -> PreparedFormData:
    """Read an audio file from disk and encode it.

    Raises:
        ValidationError: If the file does not exist
    """
    path = Path(audio_file_path)
    if not path.is_file():
        raise ValidationError(f"Audio file not found: {audio_file_path}")

    file_bytes = path.read_bytes()
    file_name = extract_file_name(audio_file_path)
    boundary = generate_boundary()
    logger.debug(f"Encoding {len(file_bytes):,} bytes from {file_name} for upload")

    body = build_body(
        boundary,
        file_bytes,
        file_name,
        granularity=granularity,
        language=language,
        extra_fields=extra_fields,
    )
    return PreparedFormData(boundary=boundary, body=body, file_name=file_name)
