"""Definition file loading shared by the registries.

Definitions are single JSON or YAML documents. YAML files use safe_load.
"""

import json
from pathlib import Path
from typing import Any, Iterator

import yaml

DEFINITION_SUFFIXES = (".json", ".yaml", ".yml")


def iter_definition_files(definitions_dir: Path) -> Iterator[Path]:
    """Definition files in a directory, sorted by name."""
    for path in sorted(definitions_dir.iterdir()):
        if path.is_file() and path.suffix.lower() in DEFINITION_SUFFIXES:
            yield path


def read_definition_file(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f)
