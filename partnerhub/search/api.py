from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from partnerhub.api import deps
from partnerhub.core.config import settings
from partnerhub.core.permissions import Caller
from .schemas import SearchQuery, SearchResults, SearchType
from .service import SearchService


router = APIRouter()


@router.get("", response_model=SearchResults)
def global_search(
    q: str = Query("", max_length=200, description="Search keyword"),
    type: SearchType = Query(SearchType.ALL, description="Type of resources to search"),
    limit: int = Query(settings.SEARCH_DEFAULT_LIMIT, ge=1, le=settings.SEARCH_MAX_LIMIT, description="Maximum number of results per type"),
    db: Session = Depends(deps.get_db),
    caller: Caller = Depends(deps.get_current_caller),
):
    """Search projects, partners and tasks, filtered by the caller's role and organization."""
    return SearchService(db).search(SearchQuery(q=q, type=type, limit=limit), caller)
