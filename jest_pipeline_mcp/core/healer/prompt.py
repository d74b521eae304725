"""Repair prompt for a single failing-test error."""

from ..runner import ClassifiedError, ErrorKind
from .models import HealingAttempt

FOCUS_BY_KIND: dict[ErrorKind, tuple[str, ...]] = {
    ErrorKind.DEPENDENCY: (
        "Missing import statements",
        "Incorrect module paths",
        "Missing mock implementations or mock factories",
    ),
    ErrorKind.SYNTAX: (
        "Syntax errors in the test code",
        "Missing brackets or parentheses",
        "TypeScript type errors",
    ),
    ErrorKind.ASSERTION: (
        "Incorrect assertion expectations",
        "Incorrect mock return values",
        "Missing test setup or async/await usage",
    ),
    ErrorKind.RUNTIME: (
        "Undefined object access",
        "Mock implementation errors",
        "Test environment setup",
    ),
    ErrorKind.TIMEOUT: (
        "Unresolved promises and async timeouts",
        "done() callback usage",
        "Resource cleanup",
    ),
}

DEFAULT_FOCUS = (
    "General test structure",
    "Mock implementations",
    "Assertion correctness",
)


def build_healing_prompt(
    source_code: str,
    test_code: str,
    error: ClassifiedError,
    previous_attempts: list[HealingAttempt],
    language: str = "typescript",
) -> str:
    """Build the prompt asking the model to fix one error in the test file."""

    history = ""
    if previous_attempts:
        history = "\nPrevious Fix Attempts:\n" + "\n".join(
            f"Attempt {a.attempt_number}:\n{a.fix}\nResult: {'Success' if a.success else 'Failed'}\n"
            for a in previous_attempts
        )

    focus = "\n".join(f"- {item}" for item in FOCUS_BY_KIND.get(error.kind, DEFAULT_FOCUS))

    return f"""You are a test healing expert. Fix the failing Jest test below.

Original Source Code:
```{language}
{source_code}
```

Current Test Code:
```{language}
{test_code}
```

Error:
{error.to_prompt_string()}
{history}
Focus on:
{focus}

Respond with ONLY the complete fixed test code. Do not include any explanations or markdown formatting."""
