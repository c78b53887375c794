from .task import TaskCreate, TaskUpdate

__all__ = ["TaskCreate", "TaskUpdate"]
