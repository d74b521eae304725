"""
Framework Rules - Framework-specific guidance for analysis and generation.

Rules exist for React, Express, NestJS and Node.js. Frameworks without
rules ("default", or None) skip the analysis step entirely.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FrameworkRules:
    """What to look for and how to test code written for one framework."""
    name: str
    analysis_instructions: str
    mocking_patterns: tuple[str, ...] = ()
    edge_cases: tuple[str, ...] = ()
    best_practices: tuple[str, ...] = ()
    import_statements: tuple[str, ...] = ()

    def to_prompt_string(self) -> str:
        """Format the generation guidelines for an AI prompt."""
        sections = [
            ("Suggested imports", self.import_statements),
            ("Mocking patterns", self.mocking_patterns),
            ("Edge cases", self.edge_cases),
            ("Best practices", self.best_practices),
        ]
        lines = [f"Framework: {self.name}"]
        for title, items in sections:
            if items:
                lines.append(f"{title}:")
                lines.extend(f"- {item}" for item in items)
        return "\n".join(lines)


REACT_RULES = FrameworkRules(
    name="React",
    analysis_instructions="""For React-specific patterns, analyze:

Component Structure:
- Props interface/type definitions
- State management approach
- Event handlers and callbacks
- Render logic and component composition

Hooks Usage:
- Built-in and custom hooks
- Hook dependencies and cleanup
- Memoization and side effects

Data Flow:
- Context usage and scope
- Parent-child communication
- Data fetching and loading states

Testing Considerations:
- Rendering strategy and user interactions
- State change verification
- Async updates""",
    mocking_patterns=(
        "Mock hooks using jest.mock()",
        "Mock context providers",
        "Mock child components",
        "Mock API calls",
    ),
    edge_cases=(
        "Loading and error states",
        "Async updates",
        "Prop changes",
        "Cleanup on unmount",
    ),
    best_practices=(
        "Use React Testing Library queries",
        "Test user interactions rather than implementation details",
        "Verify rendered output and accessibility",
    ),
    import_statements=(
        "import { render, screen, fireEvent } from '@testing-library/react'",
        "import userEvent from '@testing-library/user-event'",
    ),
)

EXPRESS_RULES = FrameworkRules(
    name="Express",
    analysis_instructions="""For Express-specific patterns, analyze:

Middleware Chain:
- Middleware order and dependencies
- Error handling middleware
- Authentication/Authorization middleware

Request/Response:
- Route and query parameters, validation
- Request body parsing
- Status codes, headers and error response structure

Data Flow:
- Request lifecycle and modifications
- Error propagation (next(err))
- Service layer and persistence calls

Testing Considerations:
- Middleware isolation
- Request/Response mocking""",
    mocking_patterns=(
        "Mock request and response objects",
        "Use jest.mock() for middleware and services",
        "Mock database connections",
        "Spy on next()",
    ),
    edge_cases=(
        "Middleware error handling",
        "Route parameter validation",
        "Async middleware",
    ),
    best_practices=(
        "Test middleware in isolation",
        "Check HTTP status codes and response structure",
        "Verify headers and query parameter handling",
    ),
)

NESTJS_RULES = FrameworkRules(
    name="NestJS",
    analysis_instructions="""For NestJS-specific patterns, analyze:

Dependency Injection:
- Constructor injection (@Injectable()) and property injection (@Inject())
- Custom providers and injection tokens
- Optional vs required dependencies

Module Structure:
- Provider registration and exports
- Repository and entity dependencies

Data Flow:
- Service and repository call chains
- Exception types and handling flow

Testing Setup Requirements:
- TestingModule configuration
- Mock providers for every injected dependency
- Repository method mocks and exception scenarios""",
    mocking_patterns=(
        "Create mock providers with useValue",
        "Use jest.spyOn() for method mocking",
        "Implement partial mocks using Partial<Interface>",
        "Mock dependency injection tokens",
    ),
    edge_cases=(
        "Optional dependency scenarios",
        "Async initialization and lifecycle hooks",
        "Dependency injection errors",
    ),
    best_practices=(
        "Use Test.createTestingModule() and module.get()",
        "Mock all external dependencies",
        "Verify dependency method calls",
        "Clear mocks between tests",
    ),
    import_statements=(
        "import { Test, TestingModule } from '@nestjs/testing'",
    ),
)

NODEJS_RULES = FrameworkRules(
    name="Node.js",
    analysis_instructions="""For Node.js-specific patterns, analyze:

Module Structure:
- Module exports (CommonJS/ESM)
- Internal vs external modules
- Initialization and resource management

Function Analysis:
- Pure vs impure functions
- Async operations and error handling
- Method chaining patterns

Dependencies:
- File system, network and database access
- Environment variables
- Third-party services

Testing Requirements:
- Module mocking strategy
- Mock chain setup and instance creation order
- Cleanup requirements""",
    mocking_patterns=(
        "Use jest.mock() for module mocking",
        "Create explicit mock chains for chained methods",
        "Mock file system operations, network requests and timers",
        "Back up and restore environment variables",
    ),
    edge_cases=(
        "Network and file system failures",
        "Timeouts",
        "Invalid input data",
        "Chained method error propagation",
    ),
    best_practices=(
        "Follow Arrange-Act-Assert",
        "Create the instance after mock setup",
        "Restore all spies after use",
    ),
)

FRAMEWORK_RULES: dict[str, FrameworkRules] = {
    "react": REACT_RULES,
    "nextjs": REACT_RULES,
    "express": EXPRESS_RULES,
    "nestjs": NESTJS_RULES,
    "nodejs": NODEJS_RULES,
}


def get_framework_rules(framework: str | None) -> FrameworkRules | None:
    """Rules for `framework` (case-insensitive), or None when there are none."""
    if not framework:
        return None
    return FRAMEWORK_RULES.get(framework.lower())
