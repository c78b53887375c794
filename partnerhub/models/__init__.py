from .user import User
from .project import Project, ProjectStatus, ProjectPriority
from .task import Task, TaskStatus, TaskPriority
from .partner import Partner, PartnerType, PartnerStatus

__all__ = [
    "User",
    "Project", "ProjectStatus", "ProjectPriority",
    "Task", "TaskStatus", "TaskPriority",
    "Partner", "PartnerType", "PartnerStatus",
]
