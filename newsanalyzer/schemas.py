from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


DEGRADED_FEATURE = "Error: Content analysis failed"
DEGRADED_EXPLANATION = (
    "The analysis service is currently experiencing issues. "
    "Please wait a moment and try again."
)


class AnalyzeRequest(BaseModel):
    # Optional so that a missing field gets the service's own 400 message.
    title: Optional[str] = None
    content: Optional[str] = None


class AnalysisResult(BaseModel):
    """Fact-check verdict for one article, serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_fake: bool = Field(alias="isFake")
    confidence: int = Field(ge=0, le=100)
    features: List[str] = Field(min_length=1)
    explanation: str = Field(min_length=1)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


def degraded_result() -> AnalysisResult:
    return AnalysisResult(
        is_fake=False,
        confidence=0,
        features=[DEGRADED_FEATURE],
        explanation=DEGRADED_EXPLANATION,
    )


class StoredRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="_id")
    title: str
    content: str
    is_fake: bool = Field(alias="isFake")
    confidence: int
    features: List[str]
    explanation: str
    created_at: datetime = Field(alias="createdAt")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
