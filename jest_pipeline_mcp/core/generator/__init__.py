"""Test generator module - synthesizes the initial Jest test file."""

from .frameworks import FRAMEWORK_RULES, FrameworkRules, get_framework_rules
from .generator import TestGenerator, extract_code
from .models import TestArtifact, resolve_test_path
from .prompt import build_analysis_prompt, build_generation_prompt

__all__ = [
    "TestGenerator",
    "TestArtifact",
    "extract_code",
    "resolve_test_path",
    "build_generation_prompt",
    "build_analysis_prompt",
    "FrameworkRules",
    "FRAMEWORK_RULES",
    "get_framework_rules",
]
