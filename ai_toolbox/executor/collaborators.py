"""Host-side collaborators consumed by the executor.

The executor never touches the editor, clipboard, file pickers or output UI
directly. It talks to these interfaces, which a host implements. The
defaults here cover headless use (the HTTP API and tests).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from ai_toolbox import config
from ai_toolbox.errors import ValidationError
from ai_toolbox.executor.schemas import ContextValues, InputResult, SourceMetadata
from ai_toolbox.workflows.schemas import TranscriptionSourceType

logger = logging.getLogger(__name__)


@runtime_checkable
class PromptFileLoader(Protocol):
    def __call__(self, path: str) -> str: ...


@runtime_checkable
class InputAcquirer(Protocol):
    def acquire(self, source_type: TranscriptionSourceType) -> Optional[InputResult]:
        """Acquire audio for a transcription action. None means cancelled."""
        ...


@runtime_checkable
class OutputSink(Protocol):
    def write(self, text: str, title: str, folder: str) -> None: ...


@runtime_checkable
class ContextGatherer(Protocol):
    def __call__(self) -> ContextValues: ...


@runtime_checkable
class TitleDeriver(Protocol):
    def __call__(self, input_result: InputResult, workflow_name: str) -> str: ...


@runtime_checkable
class Notifier(Protocol):
    def __call__(self, message: str) -> None: ...


# --- Defaults ---


class FilePromptLoader:
    """Reads prompt files relative to a base directory."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = base_dir or config.PROMPTS_DIR

    def __call__(self, path: str) -> str:
        if not path or not path.strip():
            raise ValidationError("No prompt file configured")

        prompt_path = Path(path)
        if not prompt_path.is_absolute():
            prompt_path = self.base_dir / prompt_path
        if not prompt_path.is_file():
            raise ValidationError(f"Prompt file not found: {path}")

        logger.debug(f"Loading prompt from {prompt_path}")
        return prompt_path.read_text(encoding="utf-8")


class StaticContextGatherer:
    """Returns a fixed context snapshot, e.g. one posted with an API request."""

    def __init__(self, values: Optional[ContextValues] = None):
        self.values = values or ContextValues()

    def __call__(self) -> ContextValues:
        return self.values


class LocalFileInputAcquirer:
    """Serves one pre-supplied audio file for every transcription action.

    Returns None (treated as cancelled) when no file was supplied.
    """

    def __init__(
        self,
        audio_file_path: Optional[str] = None,
        *,
        source_url: Optional[str] = None,
        metadata: Optional[SourceMetadata] = None,
    ):
        self.audio_file_path = audio_file_path
        self.source_url = source_url
        self.metadata = metadata or SourceMetadata()

    def acquire(self, source_type: TranscriptionSourceType) -> Optional[InputResult]:
        if not self.audio_file_path:
            logger.info(f"No audio file supplied for source {source_type.value}")
            return None
        return InputResult(
            audio_file_path=self.audio_file_path,
            source_url=self.source_url,
            metadata=self.metadata,
        )


@dataclass
class OutputRecord:
    text: str
    title: str
    folder: str


@dataclass
class CollectingOutputSink:
    """Keeps outputs in memory instead of writing notes."""

    outputs: list[OutputRecord] = field(default_factory=list)

    def write(self, text: str, title: str, folder: str) -> None:
        self.outputs.append(OutputRecord(text=text, title=title, folder=folder))

    @property
    def last(self) -> Optional[OutputRecord]:
        return self.outputs[-1] if self.outputs else None


def log_notice(message: str) -> None:
    """Default notifier: user-visible notices go to the log."""
    logger.info(f"[notice] {message}")
