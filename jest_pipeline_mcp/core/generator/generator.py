"""Initial test synthesis through the text-generation client."""

import logging
import re

from ..extractor import ExtractionResult, Method
from ..llm import LLMClient
from .frameworks import FrameworkRules, get_framework_rules
from .models import TestArtifact, resolve_test_path
from .prompt import build_analysis_prompt, build_generation_prompt

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```[\w-]*[ \t]*\n(.*?)(?:```|\Z)", re.DOTALL)


def extract_code(response: str) -> str:
    """Strip markdown code fences from a model response, keeping their content."""

    blocks = _FENCED_BLOCK.findall(response)
    if blocks:
        return "\n".join(block.strip("\n") for block in blocks).strip()
    return response.strip()


class TestGenerator:
    """Generate the first version of a Jest test file for a method."""
    __test__ = False

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def generate(
        self,
        extraction: ExtractionResult,
        method: Method,
        source_file: str,
        user_context: str = "",
        framework: str | None = None,
    ) -> TestArtifact:
        """
        Ask the model for tests and return them as an (unwritten) artifact.

        Frameworks with rules get an analysis call first; its answer and the
        rules go into the generation prompt.

        Raises:
            ProviderError: If a model call fails
        """
        rules = get_framework_rules(framework)
        analysis = ""
        if rules:
            analysis = await self.analyze(extraction, method, rules)

        prompt = build_generation_prompt(extraction, method, user_context, analysis, rules)
        response = await self.llm.generate_text(prompt)

        artifact = TestArtifact(
            code=extract_code(response.content),
            file_path=resolve_test_path(source_file, method.name),
        )
        logger.info("Generated tests for %s (%d characters)", method.name, len(artifact.code))
        return artifact

    async def analyze(self, extraction: ExtractionResult, method: Method, rules: FrameworkRules) -> str:
        """Ask the model for a framework-aware analysis of `method`."""

        prompt = build_analysis_prompt(method, extraction.dependencies_code, rules)
        response = await self.llm.generate_text(prompt)
        logger.info("Analyzed %s for %s", method.name, rules.name)
        return response.content.strip()
