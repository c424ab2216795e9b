"""Satisfaction survey statistics schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class DimensionAverages(BaseModel):
    technician_attitude: float = 0
    repair_speed: float = 0
    service_quality: float = 0
    overall: float = 0


class ScoreDistribution(BaseModel):
    """Surveys per tier of their overall average."""

    excellent: int = 0  # 4.5 - 5.0
    very_good: int = 0  # 3.5 - 4.49
    good: int = 0  # 2.5 - 3.49
    fair: int = 0  # 1.5 - 2.49
    poor: int = 0  # 0 - 1.49

    @property
    def total(self) -> int:
        return self.excellent + self.very_good + self.good + self.fair + self.poor


class HighlightedComment(BaseModel):
    comment: str
    score: float
    responded_at: datetime | None = None


class SatisfactionSummary(BaseModel):
    total: int = 0
    averages: DimensionAverages = Field(default_factory=DimensionAverages)
    distribution: ScoreDistribution = Field(default_factory=ScoreDistribution)
    highlighted_comments: list[HighlightedComment] = Field(default_factory=list)
