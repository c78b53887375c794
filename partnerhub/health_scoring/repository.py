from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.orm import Session

from partnerhub.models import Project, Task, TaskStatus
from partnerhub.utils.timezone import today_local
from .engine import TaskCounts


def find_project_by_id(db: Session, project_id: str, refresh: bool = False) -> Optional[Project]:
    stmt = select(Project).where(Project.id == project_id).where(Project.deleted_at.is_(None))
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    return db.execute(stmt).scalars().first()


def list_projects(
    db: Session,
    exclude_statuses: Iterable[str] = (),
    order_by_score: bool = False,
) -> List[Project]:
    stmt = select(Project).where(Project.deleted_at.is_(None))
    excluded = list(exclude_statuses)
    if excluded:
        stmt = stmt.where(Project.status.notin_(excluded))
    if order_by_score:
        stmt = stmt.order_by(Project.health_score.asc(), Project.name.asc())
    else:
        stmt = stmt.order_by(Project.created_at.asc())
    return list(db.execute(stmt).scalars())


def update_project_health_score(db: Session, project_id: str, score: int) -> None:
    db.execute(
        update(Project)
        .where(Project.id == project_id)
        .values(health_score=score)
    )
    db.commit()


def list_tasks_for_project(db: Session, project_id: str) -> List[Task]:
    stmt = (
        select(Task)
        .where(Task.project_id == project_id)
        .where(Task.deleted_at.is_(None))
    )
    return list(db.execute(stmt).scalars())


def aggregate_task_counts_by_project(
    db: Session,
    project_ids: Iterable[str],
    today: Optional[date] = None,
) -> Dict[str, TaskCounts]:
    """Total/completed/on-time task counts for many projects in a single grouped query.

    Projects without live tasks are absent from the result.
    """
    ids = [pid for pid in project_ids if pid]
    if not ids:
        return {}
    today = today or today_local()

    is_completed = Task.status == TaskStatus.COMPLETED.value
    # Same rule as engine.is_completed_on_time, at day granularity
    finished_on_time = or_(
        Task.due_date.is_(None),
        and_(Task.completed_at.isnot(None), func.date(Task.completed_at) <= Task.due_date),
        and_(Task.completed_at.is_(None), Task.due_date >= today),
    )

    stmt = (
        select(
            Task.project_id,
            func.count(Task.id).label("total"),
            func.coalesce(func.sum(case((is_completed, 1), else_=0)), 0).label("completed"),
            func.coalesce(
                func.sum(case((and_(is_completed, finished_on_time), 1), else_=0)), 0
            ).label("on_time"),
        )
        .where(Task.project_id.in_(ids))
        .where(Task.deleted_at.is_(None))
        .group_by(Task.project_id)
    )
    return {
        row.project_id: TaskCounts(
            total=int(row.total),
            completed=int(row.completed),
            on_time=int(row.on_time),
        )
        for row in db.execute(stmt)
    }
