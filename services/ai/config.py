"""
Per-feature AI configuration.

Defaults live here; Settings (environment / .env) can disable features or
force the mock provider. AIConfigManager holds the live, mutable copy.
"""

import copy
import logging
import threading
from dataclasses import dataclass, replace
from typing import Dict, Optional

from app.config import Settings, settings

logger = logging.getLogger("homehub.ai.config")

SHOPPING_SUGGESTIONS = "shopping_suggestions"
MEAL_PLANNING = "meal_planning"
EMAIL_PROCESSING = "email_processing"
CHORE_ASSIGNMENT = "chore_assignment"
LEARNING_SYSTEM = "learning_system"

PROVIDERS = ("openai", "mock", "disabled")


@dataclass
class AIConfig:
    enabled: bool
    provider: str  # openai | mock | disabled
    model: str
    fallback_to_mock: bool
    timeout: int  # milliseconds
    retry_attempts: int
    api_key: Optional[str] = None


def default_configs(cfg: Settings = settings) -> Dict[str, AIConfig]:
    """Feature defaults with Settings overrides applied."""
    configs = {
        SHOPPING_SUGGESTIONS: AIConfig(
            enabled=True,
            provider="openai",
            model=cfg.openai_model,
            fallback_to_mock=True,
            timeout=10000,
            retry_attempts=2,
        ),
        MEAL_PLANNING: AIConfig(
            enabled=True,
            provider="openai",
            model=cfg.openai_model,
            fallback_to_mock=True,
            timeout=10000,
            retry_attempts=2,
        ),
        EMAIL_PROCESSING: AIConfig(
            enabled=True,
            provider="openai",
            model=cfg.openai_model,
            fallback_to_mock=False,
            timeout=15000,
            retry_attempts=3,
        ),
        CHORE_ASSIGNMENT: AIConfig(
            enabled=True,
            provider="mock",
            model="algorithm",
            fallback_to_mock=False,
            timeout=5000,
            retry_attempts=1,
        ),
        LEARNING_SYSTEM: AIConfig(
            enabled=True,
            provider="mock",
            model="pattern",
            fallback_to_mock=False,
            timeout=5000,
            retry_attempts=1,
        ),
    }

    for config in configs.values():
        if config.provider == "openai":
            config.api_key = cfg.openai_api_key

    if not cfg.ai_shopping_enabled:
        configs[SHOPPING_SUGGESTIONS].enabled = False
    if not cfg.ai_meal_planning_enabled:
        configs[MEAL_PLANNING].enabled = False
    if not cfg.ai_email_processing_enabled:
        configs[EMAIL_PROCESSING].enabled = False

    if (cfg.ai_provider or "").lower() == "mock":
        configs[SHOPPING_SUGGESTIONS].provider = "mock"
        configs[MEAL_PLANNING].provider = "mock"

    return configs


class AIConfigManager:
    """Process-wide registry of feature configs."""

    def __init__(self, cfg: Settings = settings):
        self._settings = cfg
        self._lock = threading.Lock()
        self._configs = default_configs(cfg)

    def get_config(self, feature: str) -> AIConfig:
        with self._lock:
            config = self._configs.get(feature)
            if config is None:
                raise KeyError(f"Unknown AI feature '{feature}'")
            return copy.copy(config)

    def is_enabled(self, feature: str) -> bool:
        with self._lock:
            config = self._configs.get(feature)
            return bool(config and config.enabled and config.provider != "disabled")

    def update_config(self, feature: str, **changes) -> AIConfig:
        if "provider" in changes and changes["provider"] not in PROVIDERS:
            raise ValueError(f"Unknown provider '{changes['provider']}'")
        with self._lock:
            if feature not in self._configs:
                raise KeyError(f"Unknown AI feature '{feature}'")
            self._configs[feature] = replace(self._configs[feature], **changes)
            logger.info(f"AI config updated for {feature}: {sorted(changes)}")
            return copy.copy(self._configs[feature])

    def disable_feature(self, feature: str) -> AIConfig:
        return self.update_config(feature, enabled=False)

    def enable_feature(self, feature: str) -> AIConfig:
        return self.update_config(feature, enabled=True)

    def reset(self) -> None:
        """Restore defaults from Settings."""
        with self._lock:
            self._configs = default_configs(self._settings)


ai_config_manager = AIConfigManager()
