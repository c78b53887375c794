from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, joinedload

from partnerhub.models import Partner, Project, Task


def search_projects(
    db: Session,
    term: str,
    limit: int,
    visible_to: Optional[str] = None,
) -> List[Project]:
    """Projects whose name or description contains ``term``, most recently updated first.

    ``visible_to`` restricts results to projects the user owns, manages or created.
    """
    stmt = (
        select(Project)
        .options(joinedload(Project.owner), joinedload(Project.manager))
        .where(Project.deleted_at.is_(None))
        .where(
            or_(
                Project.name.icontains(term, autoescape=True),
                Project.description.icontains(term, autoescape=True),
            )
        )
    )
    if visible_to is not None:
        stmt = stmt.where(
            or_(
                Project.owner_id == visible_to,
                Project.manager_id == visible_to,
                Project.created_by_id == visible_to,
            )
        )
    stmt = stmt.order_by(Project.updated_at.desc()).limit(limit)
    return list(db.execute(stmt).scalars().unique())


def search_partners(
    db: Session,
    term: str,
    limit: int,
    organization_id: Optional[str] = None,
) -> List[Partner]:
    stmt = (
        select(Partner)
        .where(Partner.deleted_at.is_(None))
        .where(
            or_(
                Partner.company_name.icontains(term, autoescape=True),
                Partner.name.icontains(term, autoescape=True),
                Partner.email.icontains(term, autoescape=True),
            )
        )
    )
    if organization_id:
        stmt = stmt.where(Partner.organization_id == organization_id)
    stmt = stmt.order_by(Partner.updated_at.desc()).limit(limit)
    return list(db.execute(stmt).scalars())


def search_tasks(
    db: Session,
    term: str,
    limit: int,
    visible_to: Optional[str] = None,
) -> List[Task]:
    """Tasks whose title or description contains ``term``, soonest due first (undated last)."""
    stmt = (
        select(Task)
        .options(joinedload(Task.project), joinedload(Task.assignee))
        .where(Task.deleted_at.is_(None))
        .where(
            or_(
                Task.title.icontains(term, autoescape=True),
                Task.description.icontains(term, autoescape=True),
            )
        )
    )
    if visible_to is not None:
        stmt = stmt.where(
            or_(
                Task.assignee_id == visible_to,
                Task.created_by_id == visible_to,
            )
        )
    stmt = (
        stmt.order_by(Task.due_date.asc().nulls_last(), Task.updated_at.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().unique())
