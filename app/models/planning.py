"""Pydantic request models for the planning API."""

from typing import Literal

from pydantic import BaseModel, Field

FeatureStatus = Literal["implemented", "improved", "partial", "missing", "unknown"]


class StatusSnapshotRequest(BaseModel):
    statuses: dict[str, FeatureStatus] = Field(default_factory=dict)


class PlanRequest(StatusSnapshotRequest):
    module_id: str | None = None
    max_effort: str | None = None
    min_impact: int | None = Field(default=None, ge=0)


class PatternModel(BaseModel):
    id: str
    title: str
    module_id: str
    tags: list[str] = Field(default_factory=list)
    approach: str = ""
    success_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    session_count: int = Field(default=0, ge=0)
    pitfalls: list[str] = Field(default_factory=list)


class EvaluatorRecommendationModel(BaseModel):
    module_id: str
    title: str
    priority: Literal["critical", "high", "medium", "low"] = "medium"


class TaskHistoryModel(BaseModel):
    module_id: str
    prompt: str
    status: Literal["completed", "failed"]


class RecommendationRequest(StatusSnapshotRequest):
    checklist: dict[str, bool] = Field(default_factory=dict)
    patterns: list[PatternModel] = Field(default_factory=list)
    evaluator_recommendations: list[EvaluatorRecommendationModel] = Field(default_factory=list)
    task_history: list[TaskHistoryModel] = Field(default_factory=list)


class ModuleProgressRequest(BaseModel):
    progress: dict[str, dict[str, bool]] = Field(default_factory=dict)
    sizes: dict[str, int] | None = None
