import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Union

from partnerhub.models.task import TaskStatus
from partnerhub.utils.timezone import end_of_day, to_local_naive

# Fixed component weights (sum to 100)
ON_TIME_WEIGHT = 50
COMPLETION_WEIGHT = 30
BUDGET_WEIGHT = 20


@dataclass
class TaskCounts:
    total: int = 0
    completed: int = 0
    on_time: int = 0


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for positive values (0.5 -> 1), unlike round()."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def calculate_on_time_rate(completed_on_time: int, total_completed: int) -> float:
    """Share of completed tasks finished by their due date. No completed tasks counts as 100."""
    if total_completed == 0:
        return 100.0
    return completed_on_time / total_completed * 100


def calculate_completion_rate(completed: int, total: int) -> float:
    if total == 0:
        return 100.0
    return completed / total * 100


def calculate_budget_health(budget: Optional[float], actual_cost: Optional[float]) -> float:
    """Percentage of budget remaining, clamped to [0, 100].

    An unset or non-positive budget is treated as perfectly healthy.
    """
    if not budget or budget <= 0:
        return 100.0
    remaining = budget - (actual_cost or 0)
    return clamp(remaining / budget * 100)


def calculate_weighted_health_score(on_time_rate: float, completion_rate: float, budget_health: float) -> int:
    score = (
        ON_TIME_WEIGHT * on_time_rate
        + COMPLETION_WEIGHT * completion_rate
        + BUDGET_WEIGHT * budget_health
    ) / 100
    return int(round_half_up(clamp(score)))


def is_completed_on_time(
    due_date: Optional[Union[date, datetime]],
    completed_at: Optional[Union[date, datetime]],
    now: datetime,
) -> bool:
    """A completed task is on time when it has no due date or finished by the end of the due day.

    A completed task without a completion timestamp is judged against ``now``.
    """
    if due_date is None:
        return True
    finished = to_local_naive(completed_at) if completed_at is not None else now
    return finished <= end_of_day(due_date)


def count_tasks(tasks: Iterable, now: datetime) -> TaskCounts:
    counts = TaskCounts()
    for task in tasks:
        counts.total += 1
        if task.status != TaskStatus.COMPLETED.value:
            continue
        counts.completed += 1
        if is_completed_on_time(task.due_date, task.completed_at, now):
            counts.on_time += 1
    return counts
