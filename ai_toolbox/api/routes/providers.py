"""Provider API routes. Credentials are never returned."""

from fastapi import APIRouter, HTTPException

from ai_toolbox.providers.registry import get_provider_registry
from ai_toolbox.providers.schemas import ProviderSummary

router = APIRouter(prefix="/providers", tags=["providers"])


@router.get("", response_model=list[ProviderSummary])
async def list_providers() -> list[ProviderSummary]:
    """List configured providers with credentials redacted."""
    return get_provider_registry().list_summaries()


@router.get("/{provider_id}", response_model=ProviderSummary)
async def get_provider(provider_id: str) -> ProviderSummary:
    for summary in get_provider_registry().list_summaries():
        if summary.id == provider_id:
            return summary
    raise HTTPException(status_code=404, detail=f"Provider not found: {provider_id}")
