"""
analysis.py — Pydantic schemas for launch-site feasibility analyses.

Location / RocketConfig   — what the client sends
ZoneWarning / ZoneValidation — proximity verdict for the coordinate
FeasibilityScore          — one scored dimension (status derived from score)
*Analysis                 — the six category breakdowns
AnalysisResult            — the complete, immutable analysis record
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


# ── Enumerations ──────────────────────────────────────────────────────────────

RocketCategory = Literal["model", "industrial"]
ModelRocketType = Literal["hobby", "solo_project", "team_project"]
SafetyLevel = Literal["beginner", "intermediate", "advanced"]
WarningType = Literal["airport", "school", "military", "urban_dense", "restricted", "other"]
Severity = Literal["safe", "caution", "danger"]
FeasibilityStatus = Literal["feasible", "caution", "not_recommended"]

FEASIBLE_THRESHOLD = 70
CAUTION_THRESHOLD = 40


# ── Inputs ────────────────────────────────────────────────────────────────────

class Location(BaseModel):
    """A launch coordinate plus optional reverse-geocoded place metadata."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    country: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    display_name: Optional[str] = None


class RocketConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: RocketCategory
    model_type: Optional[ModelRocketType] = None
    safety_level: Optional[SafetyLevel] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_model_fields_for_industrial(cls, data: Any) -> Any:
        # Sub-type and safety level only describe model rockets.
        if isinstance(data, dict) and data.get("category") == "industrial":
            data = {**data, "model_type": None, "safety_level": None}
        return data

    @property
    def is_model(self) -> bool:
        return self.category == "model"

    @property
    def label(self) -> str:
        return "model rocket" if self.is_model else "industrial rocket"


# ── Zone validation ───────────────────────────────────────────────────────────

class ZoneWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: WarningType
    message: str
    distance: Optional[float] = None  # metres to the hazard, when known


class ZoneValidation(BaseModel):
    """Built by services.zone_validator.summarize_warnings — never by hand."""
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    warnings: list[ZoneWarning] = Field(default_factory=list)
    severity: Severity


# ── Scores ────────────────────────────────────────────────────────────────────

def status_for_score(score: float) -> FeasibilityStatus:
    if score >= FEASIBLE_THRESHOLD:
        return "feasible"
    if score >= CAUTION_THRESHOLD:
        return "caution"
    return "not_recommended"


class FeasibilityScore(BaseModel):
    """
    A 0-100 score with explanatory text.

    `status` is computed from `score` on every access and serialisation,
    so a stored document can never carry a status that disagrees with
    its score (an incoming "status" key is ignored).
    """
    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=0, le=100)
    details: str

    @model_validator(mode="before")
    @classmethod
    def _clamp_score(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("score"), (int, float)):
            data = {**data, "score": max(0.0, min(100.0, float(data["score"])))}
        return data

    @computed_field
    @property
    def status(self) -> FeasibilityStatus:
        return status_for_score(self.score)


class ResourcesAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    materials: FeasibilityScore
    expertise: FeasibilityScore
    facilities: FeasibilityScore
    overall: FeasibilityScore


class LegalAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    permits: FeasibilityScore
    regulations: FeasibilityScore
    restrictions: FeasibilityScore
    overall: FeasibilityScore


class GeographicalAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    terrain: FeasibilityScore
    weather: FeasibilityScore
    accessibility: FeasibilityScore
    overall: FeasibilityScore


class GeopoliticalAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    stability: FeasibilityScore
    cooperation: FeasibilityScore
    risks: FeasibilityScore
    overall: FeasibilityScore


class TimingAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    seasonality: FeasibilityScore
    current_conditions: FeasibilityScore
    optimal_window: str  # descriptive only, not part of the overall
    overall: FeasibilityScore


class PracticalityAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    cost: FeasibilityScore
    timeline: FeasibilityScore
    success_probability: FeasibilityScore
    overall: FeasibilityScore


# ── Result ────────────────────────────────────────────────────────────────────

class AnalysisResult(BaseModel):
    """A completed feasibility analysis. Immutable once assembled."""
    model_config = ConfigDict(frozen=True)

    id: str
    location: Location
    rocket_config: RocketConfig
    zone_validation: ZoneValidation
    resources: ResourcesAnalysis
    legal: LegalAnalysis
    geographical: GeographicalAnalysis
    geopolitical: GeopoliticalAnalysis
    timing: TimingAnalysis
    practicality: PracticalityAnalysis
    overall_score: int = Field(ge=0, le=100)
    recommendation: str
    created_at: datetime


# ── Requests / responses ──────────────────────────────────────────────────────

class AnalyzeLocationRequest(BaseModel):
    """Payload for POST /api/v1/analyze."""
    location: Location
    rocket_config: RocketConfig


class ValidateZoneRequest(BaseModel):
    """Payload for POST /api/v1/validate-zone."""
    location: Location


class ReverseGeocodeRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ReverseGeocodeResponse(BaseModel):
    country: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    display_name: Optional[str] = None


class AnalysisListResponse(BaseModel):
    items: list[AnalysisResult]
    total: int
    limit: int
