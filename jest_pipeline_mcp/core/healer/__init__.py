"""Healer module - repairs failing tests against observed errors."""

from .healer import TestHealer
from .models import HealingAttempt, HealingConfig, HealingInput, HealingResult, HealingStrategy
from .prompt import build_healing_prompt

__all__ = [
    "TestHealer",
    "HealingAttempt",
    "HealingConfig",
    "HealingInput",
    "HealingResult",
    "HealingStrategy",
    "build_healing_prompt",
]
