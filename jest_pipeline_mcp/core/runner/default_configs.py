"""Framework profiles for the Jest config synthesized when a project has none."""

import copy
from typing import Any, Final

SWC_TRANSFORM: Final[dict[str, Any]] = {
    "^.+\\.(t|j)sx?$": [
        "@swc/jest",
        {
            "jsc": {
                "parser": {"syntax": "typescript", "tsx": True, "decorators": True},
                "transform": {"react": {"runtime": "automatic"}},
            }
        },
    ]
}

ASSET_MAPPER: Final[dict[str, str]] = {
    "\\.(css|less|scss|sass)$": "identity-obj-proxy",
    "\\.(jpg|jpeg|png|gif|webp|svg)$": "<rootDir>/__mocks__/fileMock.js",
}

BACKEND_TEST_MATCH: Final[list[str]] = ["**/__tests__/**/*.[jt]s", "**/?(*.)+(spec|test).[jt]s"]

_BASE: Final[dict[str, Any]] = {
    "testEnvironment": "node",
    "transform": SWC_TRANSFORM,
    "moduleFileExtensions": ["ts", "tsx", "js", "jsx", "json", "node"],
    "moduleNameMapper": ASSET_MAPPER,
}

_BROWSER: Final[dict[str, Any]] = {
    **_BASE,
    "testEnvironment": "jsdom",
    "setupFilesAfterEnv": ["@testing-library/jest-dom"],
    "testMatch": ["**/__tests__/**/*.[jt]s?(x)", "**/?(*.)+(spec|test).[jt]s?(x)"],
    "transformIgnorePatterns": ["/node_modules/(?!(@testing-library|react|react-dom)/)"],
    "moduleNameMapper": {**ASSET_MAPPER, "^@/(.*)$": "<rootDir>/src/$1"},
}

PROFILES: Final[dict[str, dict[str, Any]]] = {
    "default": _BASE,
    "react": _BROWSER,
    "nextjs": _BROWSER,
    "express": {**_BASE, "testMatch": BACKEND_TEST_MATCH},
    "nestjs": {**_BASE, "moduleNameMapper": {**ASSET_MAPPER, "^@/(.*)$": "<rootDir>/src/$1"}},
    "nodejs": {
        **_BASE,
        "testMatch": BACKEND_TEST_MATCH,
        "moduleFileExtensions": ["js", "json", "ts", "node"],
        "transform": {"^.+\\.(t|j)s$": "@swc/jest"},
        "moduleNameMapper": {"^@/(.*)$": "<rootDir>/src/$1"},
    },
}

# Extra coverage settings applied on top of every profile
COVERAGE_DEFAULTS: Final[dict[str, Any]] = {
    "coverageReporters": ["json", "json-summary"],
    "collectCoverageFrom": [
        "**/*.{js,jsx,ts,tsx}",
        "!**/*.d.ts",
        "!**/node_modules/**",
        "!**/vendor/**",
    ],
}


def build_config(framework: str | None, root_dir: str) -> dict[str, Any]:
    """
    Return a fresh Jest config for a framework profile.

    Unknown or missing framework names fall back to the default profile.
    """
    profile = PROFILES.get(framework or "default", PROFILES["default"])
    config = copy.deepcopy(profile)
    config.update(copy.deepcopy(COVERAGE_DEFAULTS))
    config["rootDir"] = root_dir
    return config
