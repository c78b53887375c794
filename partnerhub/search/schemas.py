from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from partnerhub.core.config import settings

DESCRIPTION_PREVIEW_LENGTH = 200


class SearchType(str, Enum):
    ALL = "all"
    PROJECTS = "projects"
    PARTNERS = "partners"
    TASKS = "tasks"


class SearchQuery(BaseModel):
    q: str = ""
    type: SearchType = SearchType.ALL
    limit: int = Field(default=settings.SEARCH_DEFAULT_LIMIT, ge=1, le=settings.SEARCH_MAX_LIMIT)

    @field_validator("q", mode="before")
    @classmethod
    def blank_when_missing(cls, v: Optional[str]) -> str:
        return "" if v is None else v

    def includes(self, scope: SearchType) -> bool:
        return self.type in (SearchType.ALL, scope)


class SearchResultItem(BaseModel):
    id: str
    type: Literal["project", "partner", "task"]
    name: str
    description: Optional[str] = None
    status: Optional[str] = None
    relevance: int
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("description", mode="before")
    @classmethod
    def truncate_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v[:DESCRIPTION_PREVIEW_LENGTH]


class SearchResults(BaseModel):
    projects: List[SearchResultItem] = Field(default_factory=list)
    partners: List[SearchResultItem] = Field(default_factory=list)
    tasks: List[SearchResultItem] = Field(default_factory=list)
    total: int = 0
