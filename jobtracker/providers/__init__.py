from .base import ChatProvider
from .openai_compat import OpenAICompatibleProvider

from jobtracker.config import Settings
from jobtracker.log import get_logger

log = get_logger(__name__)

__all__ = ["ChatProvider", "OpenAICompatibleProvider", "get_providers"]


def get_providers(settings: Settings) -> list[ChatProvider]:
    """Providers in fallback order; only those with a credential are returned."""
    providers: list[ChatProvider] = []

    if settings.xai_api_key:
        providers.append(
            OpenAICompatibleProvider(
                "primary",
                "xai",
                api_key=settings.xai_api_key,
                model=settings.xai_model,
                base_url=settings.xai_base_url,
            )
        )
        log.info("Registered provider: xAI (%s) as primary", settings.xai_model)

    if settings.openai_api_key:
        providers.append(
            OpenAICompatibleProvider(
                "secondary",
                "openai",
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                base_url=settings.openai_base_url,
            )
        )
        log.info("Registered provider: OpenAI (%s) as secondary", settings.openai_model)

    if not providers:
        log.info("No provider API keys found — using local analysis only")

    return providers
