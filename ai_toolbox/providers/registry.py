"""Provider registry - loads configured providers from definition files."""

import logging
from pathlib import Path
from typing import Optional

from ai_toolbox import config
from ai_toolbox.loader import iter_definition_files, read_definition_file
from ai_toolbox.providers.schemas import ProviderConfig, ProviderSummary

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry of provider configurations.

    Each file under the providers definitions directory holds one
    ProviderConfig. Credentials are either inline (`api_key`) or read from
    the environment variable named by `api_key_env`.
    """

    def __init__(self, definitions_dir: Optional[Path] = None):
        self.definitions_dir = definitions_dir or config.PROVIDER_DEFINITIONS_DIR
        self._providers: dict[str, ProviderConfig] = {}
        self._loaded = False

    def load(self) -> None:
        """Load all provider definitions."""
        if self._loaded:
            return

        if not self.definitions_dir.exists():
            logger.warning(f"Provider definitions directory not found: {self.definitions_dir}")
            self._loaded = True
            return

        for path in iter_definition_files(self.definitions_dir):
            try:
                provider = ProviderConfig.model_validate(read_definition_file(path))
                if provider.id in self._providers:
                    logger.warning(f"Duplicate provider id {provider.id} in {path}, overriding")
                self._providers[provider.id] = provider
                logger.debug(f"Loaded provider: {provider.id}")
            except Exception as e:
                logger.error(f"Failed to load provider from {path}: {e}")

        self._loaded = True
        logger.info(f"Loaded {len(self._providers)} providers")

    def add(self, provider: ProviderConfig) -> None:
        """Register a provider in memory (no file is written)."""
        self.load()
        self._providers[provider.id] = provider

    def get(self, provider_id: str) -> Optional[ProviderConfig]:
        self.load()
        return self._providers.get(provider_id)

    def get_validated(self, provider_id: str) -> ProviderConfig:
        """Get provider by id, raising if not found."""
        provider = self.get(provider_id)
        if provider is None:
            available = list(self._providers.keys())
            raise ValueError(f"Provider not found: {provider_id}. Available: {available}")
        return provider

    def list_all(self) -> list[ProviderConfig]:
        self.load()
        return list(self._providers.values())

    def list_summaries(self) -> list[ProviderSummary]:
        """List providers with credentials redacted."""
        self.load()
        return [
            ProviderSummary(
                id=p.id,
                name=p.name or p.id,
                type=p.type,
                endpoint=p.endpoint,
                has_credential=bool(p.resolve_api_key()),
                model_ids=[m.id for m in p.models],
                chat_models=[m.id for m in p.models if m.supports_chat],
                transcription_models=[m.id for m in p.models if m.supports_transcription],
            )
            for p in self._providers.values()
        ]

    def count(self) -> int:
        self.load()
        return len(self._providers)

    def reload(self) -> None:
        """Force reload all definitions."""
        self._loaded = False
        self._providers.clear()
        self.load()


# Global registry instance
_registry: Optional[ProviderRegistry] = None


def get_provider_registry() -> ProviderRegistry:
    """Get the global provider registry instance."""
    global _registry
    if _registry is None:
        _registry = ProviderRegistry()
        _registry.load()
    return _registry
