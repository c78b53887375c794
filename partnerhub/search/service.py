import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from partnerhub.core.permissions import Caller
from partnerhub.models import Partner, Project, Task
from . import repository
from .metrics import search_requests_total
from .relevance import calculate_relevance
from .schemas import SearchQuery, SearchResultItem, SearchResults, SearchType


logger = logging.getLogger(__name__)


def _compact(metadata: Dict[str, Any]) -> Dict[str, Any]:
    # Missing relations are omitted rather than reported as null
    return {k: v for k, v in metadata.items() if v is not None}


def _full_name(user) -> Optional[str]:
    return user.full_name if user is not None else None


class SearchService:
    """Cross-entity search over projects, partners and tasks with relevance annotation.

    Each entity query is ordered by recency and capped at ``limit`` in the database;
    relevance annotates the returned rows and does not re-filter them.
    """

    def __init__(self, db: Session):
        self.db = db

    def search(self, query: SearchQuery, caller: Caller) -> SearchResults:
        logger.debug(
            f"[Search] q=\"{query.q}\" type={query.type.value} user={caller.user_id} "
            f"role={caller.role} org={caller.organization_id}"
        )
        # Non-privileged callers only see their own projects and tasks
        visible_to = None if caller.is_privileged else caller.user_id

        results = SearchResults()
        if query.includes(SearchType.PROJECTS):
            results.projects = self._search_projects(query, visible_to)
        if query.includes(SearchType.PARTNERS):
            results.partners = self._search_partners(query, caller.organization_id)
        if query.includes(SearchType.TASKS):
            results.tasks = self._search_tasks(query, visible_to)
        results.total = len(results.projects) + len(results.partners) + len(results.tasks)

        search_requests_total.labels(scope=query.type.value).inc()
        logger.debug(
            f"[Search] results projects={len(results.projects)} partners={len(results.partners)} "
            f"tasks={len(results.tasks)} total={results.total}"
        )
        return results

    def _search_projects(self, query: SearchQuery, visible_to: Optional[str]) -> List[SearchResultItem]:
        projects = repository.search_projects(self.db, query.q, query.limit, visible_to=visible_to)
        return [self._project_item(query.q, p) for p in projects]

    def _search_partners(self, query: SearchQuery, organization_id: Optional[str]) -> List[SearchResultItem]:
        partners = repository.search_partners(self.db, query.q, query.limit, organization_id=organization_id)
        return [self._partner_item(query.q, p) for p in partners]

    def _search_tasks(self, query: SearchQuery, visible_to: Optional[str]) -> List[SearchResultItem]:
        tasks = repository.search_tasks(self.db, query.q, query.limit, visible_to=visible_to)
        return [self._task_item(query.q, t) for t in tasks]

    @staticmethod
    def _project_item(q: str, project: Project) -> SearchResultItem:
        return SearchResultItem(
            id=project.id,
            type="project",
            name=project.name,
            description=project.description,
            status=project.status,
            relevance=calculate_relevance(q, project.name, project.description),
            metadata=_compact({
                "ownerId": project.owner_id,
                "ownerName": _full_name(project.owner),
                "managerId": project.manager_id,
                "managerName": _full_name(project.manager),
                "progress": project.progress,
                "healthScore": project.health_score,
            }),
        )

    @staticmethod
    def _partner_item(q: str, partner: Partner) -> SearchResultItem:
        display_name = partner.company_name or partner.name
        return SearchResultItem(
            id=partner.id,
            type="partner",
            name=display_name,
            description=partner.description,
            status=partner.status,
            relevance=calculate_relevance(q, display_name, partner.description, partner.name),
            metadata=_compact({
                "email": partner.email,
                "contactPerson": partner.name,
                "companyName": partner.company_name,
                "type": partner.type,
                "rating": partner.rating,
            }),
        )

    @staticmethod
    def _task_item(q: str, task: Task) -> SearchResultItem:
        return SearchResultItem(
            id=task.id,
            type="task",
            name=task.title,
            description=task.description,
            status=task.status,
            relevance=calculate_relevance(q, task.title, task.description),
            metadata=_compact({
                "projectId": task.project_id,
                "projectName": task.project.name if task.project is not None else None,
                "assigneeId": task.assignee_id,
                "assigneeName": _full_name(task.assignee),
                "dueDate": task.due_date,
                "priority": task.priority,
            }),
        )
