from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from partnerhub.api import deps
from partnerhub.core.exceptions import ResourceNotFoundError
from partnerhub.core.permissions import Caller
from .schemas import (
    BatchUpdateResult,
    HealthScoreBreakdown,
    HealthScoreStatistics,
    ProjectHealthScore,
    ProjectRead,
)
from .services import ProjectHealthScoringService


router = APIRouter()


@router.get("/projects/{project_id}/health-score", response_model=HealthScoreBreakdown)
def get_project_health_score(
    project_id: str,
    db: Session = Depends(deps.get_db),
    _: Caller = Depends(deps.get_current_caller),
):
    try:
        return ProjectHealthScoringService(db).calculate_health_score(project_id)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/projects/{project_id}/health-score/recalculate", response_model=ProjectRead)
def recalculate_project_health_score(
    project_id: str,
    db: Session = Depends(deps.get_db),
    _: Caller = Depends(deps.get_current_caller),
):
    try:
        project = ProjectHealthScoringService(db).update_project_health_score(project_id)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ProjectRead.model_validate(project)


@router.post("/health-score/recalculate-all", response_model=BatchUpdateResult)
def recalculate_all_health_scores(
    db: Session = Depends(deps.get_db),
    _: Caller = Depends(deps.get_current_privileged_caller),
):
    return ProjectHealthScoringService(db).update_all_project_health_scores()


@router.get("/health-score/statistics", response_model=HealthScoreStatistics)
def get_health_score_statistics(
    db: Session = Depends(deps.get_db),
    _: Caller = Depends(deps.get_current_caller),
):
    return ProjectHealthScoringService(db).get_health_score_statistics()


@router.get("/health-score/projects", response_model=List[ProjectHealthScore])
def get_all_projects_health_scores(
    db: Session = Depends(deps.get_db),
    _: Caller = Depends(deps.get_current_caller),
):
    return ProjectHealthScoringService(db).get_all_projects_health_scores()
