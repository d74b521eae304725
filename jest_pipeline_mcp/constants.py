"""
Shared constants used across the project.
"""

from typing import Final

# Source languages the extractor understands, keyed by file extension
LANGUAGE_BY_EXTENSION: Final[dict[str, str]] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

# Candidate suffixes tried when an import specifier has no extension
RESOLVE_EXTENSIONS: Final[tuple[str, ...]] = (".ts", ".js", "/index.ts", "/index.js")

# Jest config files, in lookup order within one directory
JEST_CONFIG_FILES: Final[tuple[str, ...]] = (
    "jest.config.js",
    "jest.config.ts",
    "jest.config.mjs",
    "jest.config.cjs",
    "jest.config.json",
)

# Markers of a repository root (package.json plus one of these)
PROJECT_ROOT_MARKERS: Final[tuple[str, ...]] = (
    ".git", "lerna.json", "nx.json", "pnpm-workspace.yaml"
)

# File constraints
MAX_CODE_SIZE: Final[int] = 1_000_000  # 1MB

# AI Configuration
DEFAULT_PROVIDER: Final[str] = "openai"
AI_TEMPERATURE: Final[float] = 0.2
AI_MAX_TOKENS: Final[int] = 4096
PROVIDER_ENV: Final[str] = "LLM_PROVIDER"

# Providers are all reached through OpenAI-compatible endpoints
PROVIDER_BASE_URLS: Final[dict[str, str | None]] = {
    "openai": None,
    "anthropic": "https://api.anthropic.com/v1/",
    "qwen": "https://router.huggingface.co/v1",
}
PROVIDER_DEFAULT_MODELS: Final[dict[str, str]] = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-sonnet-20241022",
    "qwen": "Qwen/QwQ-32B-Preview",
}
PROVIDER_API_KEY_ENV: Final[dict[str, str]] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "qwen": "HF_TOKEN",
}

# Test execution
TEST_TIMEOUT_SECONDS: Final[int] = 120
COVERAGE_FLUSH_TIMEOUT: Final[float] = 1.0
COVERAGE_SUMMARY_FILE: Final[str] = "coverage-summary.json"
COVERAGE_DETAIL_FILE: Final[str] = "coverage-final.json"

# Healing and coverage enhancement budgets
DEFAULT_MAX_RETRIES: Final[int] = 3
DEFAULT_HEALING_STRATEGY: Final[str] = "conservative"
DEFAULT_MAX_ENHANCEMENT_ATTEMPTS: Final[int] = 3
DEFAULT_COVERAGE_MINIMUM: Final[float] = 80.0

NO_LOCAL_DEPENDENCIES_MESSAGE: Final[str] = "No local dependencies found for the entry file."
