"""Coverage enhancer module - extends passing tests toward coverage minimums."""

from .enhancer import CoverageEnhancer
from .models import CoverageAttempt, CoverageConfig, EnhancementInput, EnhancementResult
from .prompt import build_coverage_prompt

__all__ = [
    "CoverageEnhancer",
    "CoverageAttempt",
    "CoverageConfig",
    "EnhancementInput",
    "EnhancementResult",
    "build_coverage_prompt",
]
