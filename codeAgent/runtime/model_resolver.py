"""Model factory wiring using environment-derived settings.

One ModelFactory is built per runtime and passed down explicitly. It turns a
ModelTier into a ChatOpenAI client pointed at the configured OpenAI-compatible
endpoint (OpenRouter by default) and caches clients per tier on the instance.

Example:
    >>> factory = ModelFactory(get_settings())
    >>> model = factory.get(ModelTier.LARGE)
    >>> reply = await model.ainvoke("Hello!")
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from codeAgent.config.settings import Settings
from codeAgent.models import ModelRegistry, ModelTier, build_default_registry
from codeAgent.utils.error_handler import ConfigurationError

LOGGER = logging.getLogger(__name__)

ChatBuilder = Callable[[ModelTier, str], BaseChatModel]


def _chat_kwargs(settings: Settings, model_id: str) -> Dict[str, object]:
    models = settings.models
    if not models.api_key:
        raise ConfigurationError(
            f"Missing API key for model {model_id}",
            user_message="AGENT_API_KEY is not set. Add it to your environment or .env file.",
        )
    kwargs: Dict[str, object] = {
        "model": model_id,
        "api_key": models.api_key,
        "temperature": models.temperature,
        "default_headers": {
            "HTTP-Referer": "http://localhost",
            "X-Title": models.app_title,
        },
    }
    if models.base_url:
        kwargs["base_url"] = models.base_url
    return kwargs


class ModelFactory:
    """Resolve model tiers to chat model clients.

    Args:
        settings: Application settings (endpoint, key, tier model ids)
        registry: Tier registry; built from settings when omitted
        builder: Optional ``(tier, model_id) -> BaseChatModel`` override,
            used by tests to inject fake chat models
    """

    def __init__(
        self,
        settings: Settings,
        registry: Optional[ModelRegistry] = None,
        builder: Optional[ChatBuilder] = None,
    ) -> None:
        self.settings = settings
        self.registry = registry or build_default_registry(settings.models)
        self._builder = builder
        self._cache: Dict[ModelTier, BaseChatModel] = {}

    def validate(self) -> None:
        """Fail fast when the endpoint credentials are missing.

        Raises:
            ConfigurationError: If no API key is configured
        """
        if self._builder is None:
            _chat_kwargs(self.settings, self.registry.get(ModelTier.LARGE).model_id)

    def model_id(self, tier: ModelTier) -> str:
        return self.registry.get(tier).model_id

    def get(self, tier: ModelTier) -> BaseChatModel:
        """Return the (cached) chat model serving ``tier``.

        Raises:
            ConfigurationError: If the API key is missing
            KeyError: If the tier is not registered
        """
        tier = ModelTier(tier)
        if tier not in self._cache:
            model_id = self.model_id(tier)
            LOGGER.info(f"Model selected for {tier.value}: {model_id}")
            if self._builder is not None:
                self._cache[tier] = self._builder(tier, model_id)
            else:
                self._cache[tier] = ChatOpenAI(**_chat_kwargs(self.settings, model_id))
        return self._cache[tier]
