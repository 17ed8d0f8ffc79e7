from providers.base import BaseProvider, ProviderResult
from providers.openai_provider import OpenAIProvider


__all__ = [
    "BaseProvider",
    "ProviderResult",
    "OpenAIProvider",
]
