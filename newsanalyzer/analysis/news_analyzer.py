import logging
from dataclasses import dataclass, field
from typing import Protocol, Union

from newsanalyzer.analysis.chains import build_analysis_prompt
from newsanalyzer.core.response_parser import parse_analysis_response
from newsanalyzer.schemas import AnalysisResult, DEGRADED_EXPLANATION, degraded_result


class CompletionClient(Protocol):
    async def complete(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class GenuineAnalysis:
    result: AnalysisResult


@dataclass(frozen=True)
class DegradedAnalysis:
    """Analysis could not be completed. ``reason`` is for operators only."""

    stage: str
    reason: str
    explanation: str = DEGRADED_EXPLANATION
    result: AnalysisResult = field(default_factory=degraded_result, repr=False)


AnalysisOutcome = Union[GenuineAnalysis, DegradedAnalysis]


class NewsAnalyzer:
    def __init__(self, client: CompletionClient):
        self._client = client

    async def analyze(self, title: str, content: str) -> AnalysisOutcome:
        """Run prompt -> model -> validation for one article.

        Never raises for upstream problems: transport failures and unusable
        replies both come back as ``DegradedAnalysis``.
        """
        prompt = build_analysis_prompt(title, content)

        stage = "calling"
        try:
            raw_text = await self._client.complete(prompt)
            stage = "validating"
            result = parse_analysis_response(raw_text)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            logging.error(f"Analysis error ({stage}) for '{title[:80]}': {reason}")
            return DegradedAnalysis(stage=stage, reason=reason)

        logging.info(
            f"✅ Analysis complete: '{title[:80]}' -> isFake={result.is_fake}, "
            f"confidence={result.confidence}%"
        )
        return GenuineAnalysis(result)
