"""
Data models for AML provider results.

Provider JSON is validated with pydantic at the boundary; the engine only
sees the frozen AmlResult / RiskIndicator records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Indicator codes at or below this are sanctions / critical severity
CRITICAL_INDICATOR_CODE = 5004
AML_SCORE_MIN = 0.0
AML_SCORE_MAX = 10.0


class IndicatorPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: int
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def null_name_as_blank(cls, v: Any) -> Any:
        return "" if v is None else v


class RiskIndicatorPayload(BaseModel):
    """One entry of the provider's risk_indicators list."""

    model_config = ConfigDict(extra="ignore")

    indicator: IndicatorPayload
    source: str = ""

    @field_validator("source", mode="before")
    @classmethod
    def null_source_as_blank(cls, v: Any) -> Any:
        return "" if v is None else v


class RiskScorePayload(BaseModel):
    """The `data` object of a risk-score response."""

    model_config = ConfigDict(extra="ignore")

    risk_score: float = Field(..., ge=AML_SCORE_MIN, le=AML_SCORE_MAX)
    risk_indicators: list[RiskIndicatorPayload] = Field(default_factory=list)

    @field_validator("risk_indicators", mode="before")
    @classmethod
    def null_indicators_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class RiskScoreResponse(BaseModel):
    """Envelope of a risk-score response: {code, message, data}."""

    model_config = ConfigDict(extra="ignore")

    code: int = 200
    message: str = ""
    data: RiskScorePayload | None = None


@dataclass(frozen=True)
class RiskIndicator:
    """A coded compliance flag raised by the AML provider."""

    code: int
    name: str
    source: str = ""

    @property
    def is_critical(self) -> bool:
        return self.code <= CRITICAL_INDICATOR_CODE

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "name": self.name, "source": self.source}


@dataclass(frozen=True)
class AmlResult:
    """Raw provider score (0-10) plus the indicators behind it."""

    risk_score: float
    risk_indicators: tuple[RiskIndicator, ...] = ()

    @classmethod
    def from_payload(cls, payload: RiskScorePayload) -> "AmlResult":
        return cls(
            risk_score=payload.risk_score,
            risk_indicators=tuple(
                RiskIndicator(code=item.indicator.code, name=item.indicator.name, source=item.source)
                for item in payload.risk_indicators
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "risk_score": self.risk_score,
            "risk_indicators": [i.to_dict() for i in self.risk_indicators],
        }
