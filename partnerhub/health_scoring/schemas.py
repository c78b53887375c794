from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthScoreDetails(CamelModel):
    total_tasks: int = 0
    completed_tasks: int = 0
    on_time_completed_tasks: int = 0
    budget: float = 0.0
    actual_cost: float = 0.0


class HealthScoreBreakdown(CamelModel):
    on_time_rate: float
    completion_rate: float
    budget_health: float
    total_score: int = Field(..., ge=0, le=100)
    details: HealthScoreDetails


class BatchUpdateResult(CamelModel):
    total_projects: int
    updated_projects: int
    errors: List[str] = Field(default_factory=list)


class ScoreDistribution(CamelModel):
    excellent: int = 0  # 80-100
    good: int = 0  # 60-79
    fair: int = 0  # 40-59
    poor: int = 0  # 0-39


class HealthScoreStatistics(CamelModel):
    average_score: int = 0
    score_distribution: ScoreDistribution = Field(default_factory=ScoreDistribution)
    projects_at_risk: int = 0
    total_projects: int = 0
    average_on_time_rate: float = 0.0
    average_completion_rate: float = 0.0
    average_budget_health: float = 0.0


class ProjectHealthScore(CamelModel):
    project_id: str
    project_name: str
    health_score: int
    breakdown: HealthScoreBreakdown


class ProjectRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    status: str
    health_score: int
    progress: int = 0
    budget: Optional[float] = None
    actual_cost: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    owner_id: str
    manager_id: Optional[str] = None
    organization_id: Optional[str] = None
