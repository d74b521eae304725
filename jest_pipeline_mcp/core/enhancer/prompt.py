"""Coverage enhancement prompt."""

from ..coverage import CoverageReport
from .models import CoverageAttempt


def build_coverage_prompt(
    target_code: str,
    test_code: str,
    coverage: CoverageReport,
    previous_attempts: list[CoverageAttempt],
    language: str = "typescript",
) -> str:
    """Build the prompt asking the model to extend tests toward uncovered code."""

    history = ""
    if previous_attempts:
        history = "\nPrevious Enhancement Attempts:\n" + "\n".join(
            f"Attempt {a.attempt_number}:\n{a.test_code}\n"
            f"Coverage Result{'' if a.tests_passed else ' (tests failed)'}:\n"
            + "\n".join(f"- {name.capitalize()}: {value}%" for name, value in a.coverage.metrics().items())
            + "\n"
            for a in previous_attempts
        )

    return f"""You are a test coverage expert. Enhance the test coverage for the following code.

Target Code:
```{language}
{target_code}
```

Current Test Code:
```{language}
{test_code}
```

Current Coverage:
{coverage.to_prompt_string()}
{history}
Please enhance the test coverage by:
1. Adding test cases for uncovered lines
2. Testing all branch conditions
3. Adding tests for uncovered functions
4. Keeping every existing test passing and the existing naming conventions

Respond with ONLY the complete enhanced test code. Do not include any explanations or markdown formatting."""
