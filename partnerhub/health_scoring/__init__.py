"""Project health scoring package.

This module contains:
- Pure scoring formulas (engine) that can be unit-tested without a database
- Repository functions over projects/tasks, including the grouped task aggregate
- ProjectHealthScoringService: single/batch recompute, task-change hook, statistics
- A Celery beat schedule that runs the batch recompute once a day
"""

from .services import ProjectHealthScoringService

__all__ = ["ProjectHealthScoringService"]
