from typing import Any


class ResourceNotFoundError(Exception):
    """Raised when a project or other referenced entity does not exist."""

    def __init__(self, resource_type: str, resource_id: Any):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id}" not found')

    @classmethod
    def for_project(cls, project_id: Any) -> "ResourceNotFoundError":
        return cls("Project", project_id)

    @classmethod
    def for_task(cls, task_id: Any) -> "ResourceNotFoundError":
        return cls("Task", task_id)
