from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from partnerhub.core.exceptions import ResourceNotFoundError
from partnerhub.models import Project, ProjectStatus
from partnerhub.utils.timezone import now_local_naive
from . import repository
from .engine import (
    TaskCounts,
    calculate_budget_health,
    calculate_completion_rate,
    calculate_on_time_rate,
    calculate_weighted_health_score,
    count_tasks,
    round_half_up,
)
from .metrics import (
    health_score_batch_runs_total,
    health_score_recompute_failures_total,
    health_score_recomputes_total,
)
from .schemas import (
    BatchUpdateResult,
    HealthScoreBreakdown,
    HealthScoreDetails,
    HealthScoreStatistics,
    ProjectHealthScore,
    ScoreDistribution,
)


logger = logging.getLogger(__name__)

# No meaningful task data yet: scored as zero
NOT_STARTED_STATUSES = frozenset({ProjectStatus.DRAFT.value, ProjectStatus.PLANNING.value})
# Finished projects keep their last stored score
FINISHED_STATUSES = frozenset({ProjectStatus.COMPLETED.value, ProjectStatus.CANCELLED.value})
SHORT_CIRCUIT_STATUSES = NOT_STARTED_STATUSES | FINISHED_STATUSES

AT_RISK_THRESHOLD = 50


def _to_float(value: Union[Decimal, float, int, None]) -> float:
    return float(value) if value is not None else 0.0


class ProjectHealthScoringService:
    """Project Health Score engine.

    HealthScore = (50 * OnTimeRate + 30 * CompletionRate + 20 * BudgetHealth) / 100

    - OnTimeRate: completed tasks finished by their due date / completed tasks
    - CompletionRate: completed tasks / all tasks
    - BudgetHealth: remaining budget / budget, clamped to [0, 100]
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = now_local_naive):
        self.db = db
        self.clock = clock

    # High-level compute API
    def calculate_health_score(self, project_id: str) -> HealthScoreBreakdown:
        project = repository.find_project_by_id(self.db, project_id)
        if not project:
            raise ResourceNotFoundError.for_project(project_id)

        counts: Optional[TaskCounts] = None
        if project.status not in SHORT_CIRCUIT_STATUSES:
            tasks = repository.list_tasks_for_project(self.db, project.id)
            counts = count_tasks(tasks, self.clock())

        breakdown = self._build_breakdown(project, counts)
        logger.debug(
            f"[HealthScore] Calculated for project {project_id}: "
            f"OnTimeRate={breakdown.on_time_rate:.1f}%, CompletionRate={breakdown.completion_rate:.1f}%, "
            f"BudgetHealth={breakdown.budget_health:.1f}%, Total={breakdown.total_score}"
        )
        return breakdown

    def update_project_health_score(self, project_id: str) -> Project:
        breakdown = self.calculate_health_score(project_id)
        repository.update_project_health_score(self.db, project_id, breakdown.total_score)
        health_score_recomputes_total.inc()
        logger.info(f"[HealthScore] Health score updated for project {project_id}: {breakdown.total_score}")
        return repository.find_project_by_id(self.db, project_id, refresh=True)

    def update_all_project_health_scores(self) -> BatchUpdateResult:
        projects = repository.list_projects(self.db, exclude_statuses=SHORT_CIRCUIT_STATUSES)
        # Capture ids up front; a rollback expires loaded instances
        project_ids = [p.id for p in projects]

        errors: List[str] = []
        updated = 0
        for project_id in project_ids:
            try:
                self.update_project_health_score(project_id)
                updated += 1
            except Exception as e:
                self.db.rollback()
                message = f"Failed to update health score for project {project_id}: {e}"
                logger.error(f"[HealthScore] {message}")
                errors.append(message)
                health_score_recompute_failures_total.inc()

        logger.info(f"[HealthScore] Batch update completed: {updated}/{len(project_ids)} projects updated")
        return BatchUpdateResult(
            total_projects=len(project_ids),
            updated_projects=updated,
            errors=errors,
        )

    def scheduled_health_score_update(self) -> BatchUpdateResult:
        logger.info("[HealthScore] Running scheduled health score update...")
        health_score_batch_runs_total.inc()
        result = self.update_all_project_health_scores()
        logger.info(
            f"[HealthScore] Scheduled update completed: "
            f"{result.updated_projects}/{result.total_projects} projects updated"
        )
        if result.errors:
            logger.warning(f"[HealthScore] Errors during scheduled update: {len(result.errors)}")
        return result

    def on_task_changed(self, project_id: Optional[str]) -> None:
        """Best-effort recompute after a task mutation. Never raises."""
        if not project_id:
            return
        try:
            self.update_project_health_score(project_id)
            logger.debug(f"[HealthScore] Recalculated for project {project_id} due to task change")
        except Exception as e:
            health_score_recompute_failures_total.inc()
            logger.error(f"[HealthScore] Failed to recalculate health score for project {project_id}: {e}")
            try:
                self.db.rollback()
            except Exception as rollback_error:
                logger.warning(f"[HealthScore] Rollback after failed recompute also failed: {rollback_error}")

    # Reporting
    def get_health_score_statistics(self) -> HealthScoreStatistics:
        projects = repository.list_projects(self.db, exclude_statuses=FINISHED_STATUSES)
        if not projects:
            return HealthScoreStatistics()

        breakdowns = self._breakdowns_for(projects)
        count = len(projects)
        scores = [int(p.health_score or 0) for p in projects]

        distribution = ScoreDistribution(
            excellent=sum(1 for s in scores if s >= 80),
            good=sum(1 for s in scores if 60 <= s < 80),
            fair=sum(1 for s in scores if 40 <= s < 60),
            poor=sum(1 for s in scores if s < 40),
        )
        total_on_time = sum(b.on_time_rate for b in breakdowns.values())
        total_completion = sum(b.completion_rate for b in breakdowns.values())
        total_budget = sum(b.budget_health for b in breakdowns.values())

        return HealthScoreStatistics(
            average_score=int(round_half_up(sum(scores) / count)),
            score_distribution=distribution,
            projects_at_risk=sum(1 for s in scores if s < AT_RISK_THRESHOLD),
            total_projects=count,
            average_on_time_rate=round_half_up(total_on_time / count, 2),
            average_completion_rate=round_half_up(total_completion / count, 2),
            average_budget_health=round_half_up(total_budget / count, 2),
        )

    def get_all_projects_health_scores(self) -> List[ProjectHealthScore]:
        projects = repository.list_projects(
            self.db, exclude_statuses=FINISHED_STATUSES, order_by_score=True
        )
        breakdowns = self._breakdowns_for(projects)
        results = [
            ProjectHealthScore(
                project_id=p.id,
                project_name=p.name,
                health_score=breakdowns[p.id].total_score,
                breakdown=breakdowns[p.id],
            )
            for p in projects
        ]
        # Worst first by the freshly computed score
        results.sort(key=lambda r: r.health_score)
        return results

    # --- Internals ---
    def _breakdowns_for(self, projects: List[Project]) -> Dict[str, HealthScoreBreakdown]:
        live_ids = [p.id for p in projects if p.status not in SHORT_CIRCUIT_STATUSES]
        counts = repository.aggregate_task_counts_by_project(
            self.db, live_ids, today=self.clock().date()
        )
        return {
            p.id: self._build_breakdown(p, counts.get(p.id, TaskCounts()))
            for p in projects
        }

    def _build_breakdown(self, project: Project, counts: Optional[TaskCounts]) -> HealthScoreBreakdown:
        budget = _to_float(project.budget)
        actual_cost = _to_float(project.actual_cost)

        if project.status in NOT_STARTED_STATUSES:
            return HealthScoreBreakdown(
                on_time_rate=0.0,
                completion_rate=0.0,
                budget_health=0.0,
                total_score=0,
                details=HealthScoreDetails(budget=budget, actual_cost=actual_cost),
            )
        if project.status in FINISHED_STATUSES:
            return HealthScoreBreakdown(
                on_time_rate=100.0,
                completion_rate=100.0,
                budget_health=100.0,
                total_score=int(project.health_score or 0),
                details=HealthScoreDetails(budget=budget, actual_cost=actual_cost),
            )

        counts = counts or TaskCounts()
        on_time_rate = calculate_on_time_rate(counts.on_time, counts.completed)
        completion_rate = calculate_completion_rate(counts.completed, counts.total)
        budget_health = calculate_budget_health(budget, actual_cost)

        return HealthScoreBreakdown(
            on_time_rate=round_half_up(on_time_rate, 2),
            completion_rate=round_half_up(completion_rate, 2),
            budget_health=round_half_up(budget_health, 2),
            total_score=calculate_weighted_health_score(on_time_rate, completion_rate, budget_health),
            details=HealthScoreDetails(
                total_tasks=counts.total,
                completed_tasks=counts.completed,
                on_time_completed_tasks=counts.on_time,
                budget=budget,
                actual_cost=actual_cost,
            ),
        )
