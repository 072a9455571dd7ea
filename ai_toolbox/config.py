"""Environment-driven settings.

All knobs are read once at import time from the environment, the same way the
executor reads its feature flags. Tests override them by patching the module
attributes or by passing explicit arguments to the registries.
"""

import os
from pathlib import Path

# Root directory holding `workflows/` and `providers/` definition files
DEFINITIONS_DIR = Path(
    os.environ.get(
        "AI_TOOLBOX_DEFINITIONS_DIR",
        str(Path(__file__).parent / "definitions"),
    )
)

WORKFLOW_DEFINITIONS_DIR = DEFINITIONS_DIR / "workflows"
PROVIDER_DEFINITIONS_DIR = DEFINITIONS_DIR / "providers"

# Base directory for prompts loaded with prompt_source_type="from-file"
PROMPTS_DIR = Path(os.environ.get("AI_TOOLBOX_PROMPTS_DIR", str(DEFINITIONS_DIR / "prompts")))

# Provider HTTP timeouts (seconds). Transcriptions of long audio are slow,
# so the read timeout is generous, but never unbounded.
HTTP_CONNECT_TIMEOUT = float(os.environ.get("AI_TOOLBOX_HTTP_CONNECT_TIMEOUT", "30"))
HTTP_READ_TIMEOUT = float(os.environ.get("AI_TOOLBOX_HTTP_TIMEOUT", "300"))

LOG_LEVEL = os.environ.get("AI_TOOLBOX_LOG_LEVEL", "INFO").upper()
