"""Prompts for method analysis and initial test synthesis."""

from ..extractor import ExtractionResult, Method
from .frameworks import FrameworkRules

_IMPORT_RULES = {
    "typescript": """- Use ES6 import statements
- Named exports: import { ClassName, namedExport } from './module'
- Default exports: import DefaultExport from './module'
- Give mocks type assertions so they satisfy the declared interfaces""",
    "javascript": """- Use CommonJS require statements
- Named exports: const { ClassName, namedExport } = require('./module')
- Default exports: const DefaultExport = require('./module')""",
}


def build_generation_prompt(
    extraction: ExtractionResult,
    method: Method,
    user_context: str = "",
    analysis: str = "",
    rules: FrameworkRules | None = None,
) -> str:
    """Build the prompt asking for a complete Jest test file for one method."""

    all_imports = "\n".join(dict.fromkeys([
        *extraction.input_imports,
        *extraction.dependency_imports,
        *extraction.class_import_statements,
    ]))
    language = "JavaScript" if extraction.is_javascript else "TypeScript"

    framework_sections = ""
    if analysis:
        framework_sections += f"\nCode Analysis:\n{analysis}\n"
    if rules:
        framework_sections += f"\nFramework Guidelines:\n{rules.to_prompt_string()}\n"

    return f"""You are an expert in {language} unit testing using Jest. Write comprehensive unit tests for one method.

Export Type:
{extraction.export_type.value}

Dependencies:
{extraction.dependencies_code or "(none)"}

Import Statements:
{all_imports or "(none)"}

Method Details:
Function Name: "{method.name}"
Code:
{method.code}

Additional Context:
{user_context or "(none)"}
{framework_sections}
Requirements:

1. Imports:
{_IMPORT_RULES[extraction.language]}
- The test file lives in the same directory as the source file

2. Mocking:
- Use jest.mock() for external dependencies and jest.spyOn() for spying
- Reset mocks in beforeEach/afterEach

3. Cases:
- Happy path, error handling, edge and boundary values
- Invalid, null and undefined inputs
- Asynchronous behavior if applicable

4. Structure:
- Arrange, Act, Assert
- Group related tests with describe blocks and use descriptive names

Respond with ONLY the test file code, no explanations and no markdown formatting."""


def build_analysis_prompt(method: Method, dependencies_code: str, rules: FrameworkRules) -> str:
    """Build the prompt asking for a framework-aware analysis of one method."""

    return f"""Analyze the following code for test generation:

Method Code:
{method.code}

Dependencies:
{dependencies_code or "(none)"}

Framework: {rules.name}

Please provide a detailed analysis in this structure:

1. Code Dependencies
- List all dependencies required by the code
- Identify dependency injection patterns used
- Note required methods and interfaces

2. Method Analysis
- Input parameters and types
- Return type and structure
- Error conditions and types
- External service calls, state changes and side effects

3. Test Requirements
- Success and error scenarios
- Edge cases
- Mock and data requirements

4. Framework-Specific Analysis
{rules.analysis_instructions}

End your analysis with a summary of key testing priorities and potential implementation challenges."""
