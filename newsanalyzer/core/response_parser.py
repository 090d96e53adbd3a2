"""Extraction and validation of the model's JSON verdict.

The model is told to answer with a bare JSON object, but replies often wrap it
in prose or a ```json fence. The whole reply is tried first; failing that, the
span from the first ``{`` to the last ``}`` is used.
"""

import json
import math
import logging
from typing import Any, Dict

from newsanalyzer.schemas import AnalysisResult


class ResponseParseError(Exception):
    """Base class for unusable model replies."""


class ExtractionError(ResponseParseError):
    pass


class ParseError(ResponseParseError):
    pass


class ResponseValidationError(ResponseParseError):
    pass


def extract_json_payload(raw_text: str) -> str:
    text = (raw_text or "").strip()

    try:
        if isinstance(json.loads(text), dict):
            return text
    except (ValueError, RecursionError):
        pass

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise ExtractionError("Could not find a JSON object in the AI response")
    return text[start:end + 1]


def _load_object(candidate: str) -> Dict[str, Any]:
    try:
        data = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        raise ParseError(f"Malformed JSON in AI response: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 92.5 must become 93.
    return int(math.floor(value + 0.5))


def validate_analysis(data: Dict[str, Any]) -> AnalysisResult:
    """Check fields in a fixed order and normalize them into an AnalysisResult."""
    is_fake = data.get("isFake")
    if not isinstance(is_fake, bool):
        raise ResponseValidationError("Invalid analysis result: isFake must be a boolean")

    confidence = data.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ResponseValidationError("Invalid confidence score")
    try:
        in_range = math.isfinite(confidence) and 0 <= confidence <= 100
    except OverflowError:
        # ints too large for a float
        in_range = False
    if not in_range:
        raise ResponseValidationError("Invalid confidence score")

    features = data.get("features")
    if not isinstance(features, list) or not features:
        raise ResponseValidationError("No analysis features found")

    explanation = data.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        raise ResponseValidationError("No explanation provided")

    if not all(isinstance(f, str) for f in features):
        raise ResponseValidationError("Analysis features must be strings")
    cleaned = [f.strip() for f in features if f.strip()]
    if not cleaned:
        raise ResponseValidationError("No analysis features found after trimming")

    return AnalysisResult(
        is_fake=is_fake,
        confidence=_round_half_up(confidence),
        features=cleaned,
        explanation=explanation.strip(),
    )


def parse_analysis_response(raw_text: str) -> AnalysisResult:
    candidate = extract_json_payload(raw_text)
    data = _load_object(candidate)
    result = validate_analysis(data)
    logging.debug(f"Validated AI analysis: isFake={result.is_fake}, confidence={result.confidence}")
    return result
