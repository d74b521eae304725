"""Core domain logic for the Jest pipeline."""


from .coverage import CoverageReport, CoverageThresholds, parse_coverage
from .enhancer import CoverageEnhancer, CoverageConfig, EnhancementInput, EnhancementResult
from .errors import (
    FileAccessError,
    MethodNotFoundError,
    MissingAPIKeyError,
    ParseFailureError,
    PipelineError,
    ProviderError,
)
from .extractor import ExtractionResult, Method, SourceGraphExtractor, extract_dependencies
from .generator import TestArtifact, TestGenerator
from .healer import HealingConfig, HealingInput, HealingResult, HealingStrategy, TestHealer
from .llm import LLMClient, LLMProvider, create_llm_client
from .runner import ExecutionResult, JestRunner, RunOptions, RunStatus, run_tests

__all__ = [
    # Extractor
    "SourceGraphExtractor",
    "extract_dependencies",
    "ExtractionResult",
    "Method",
    # Runner
    "JestRunner",
    "run_tests",
    "RunOptions",
    "RunStatus",
    "ExecutionResult",
    # Coverage
    "parse_coverage",
    "CoverageReport",
    "CoverageThresholds",
    # Healer
    "TestHealer",
    "HealingConfig",
    "HealingInput",
    "HealingResult",
    "HealingStrategy",
    # Enhancer
    "CoverageEnhancer",
    "CoverageConfig",
    "EnhancementInput",
    "EnhancementResult",
    # Generator
    "TestGenerator",
    "TestArtifact",
    # LLM
    "LLMClient",
    "LLMProvider",
    "create_llm_client",
    # Errors
    "PipelineError",
    "FileAccessError",
    "ParseFailureError",
    "MethodNotFoundError",
    "ProviderError",
    "MissingAPIKeyError",
]
