from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from backoffice.core.errors import InvalidOperation
from backoffice.models.projects import Project
from backoffice.models.work import TaskStatus
from backoffice.schemas.accounts import StaffSummary
from backoffice.schemas.projects import ProjectRead
from backoffice.schemas.tasks import TaskBoard, TaskRead
from backoffice.schemas.workspace import ProjectSummary

# Bucket order of every board, left to right.
BOARD_COLUMNS: tuple[tuple[TaskStatus, str], ...] = (
    (TaskStatus.TODO, "todo"),
    (TaskStatus.IN_PROGRESS, "in_progress"),
    (TaskStatus.REVIEW, "review"),
    (TaskStatus.BLOCKED, "blocked"),
    (TaskStatus.DONE, "done"),
)
UPCOMING_LIMIT = 5


def _status_of(task: TaskRead) -> TaskStatus:
    try:
        return TaskStatus(task.status)
    except ValueError:
        raise InvalidOperation(
            f"Task {task.id} has unknown status {task.status!r}",
            reason="task.status.unknown",
        ) from None


def board_for(tasks: Iterable[TaskRead]) -> TaskBoard:
    buckets: dict[TaskStatus, list[TaskRead]] = {status: [] for status, _ in BOARD_COLUMNS}
    for task in tasks:
        buckets[_status_of(task)].append(task)
    return TaskBoard(**{column: buckets[status] for status, column in BOARD_COLUMNS})


def computed_progress(completed: int, total: int, fallback: int) -> int:
    if total == 0:
        return fallback
    # Half-up rounding of completed / total * 100.
    return (completed * 200 + total) // (2 * total)


def _upcoming_key(task: TaskRead) -> tuple:
    return (
        task.due_date is None,
        task.due_date or date.min,
        task.updated_at is None,
        task.updated_at or datetime.min,
        task.id,
    )


def upcoming_tasks(tasks: Iterable[TaskRead], limit: int = UPCOMING_LIMIT) -> list[TaskRead]:
    pending = [t for t in tasks if _status_of(t) != TaskStatus.DONE]
    return sorted(pending, key=_upcoming_key)[:limit]


def contributors(tasks: Iterable[TaskRead]) -> list[StaffSummary]:
    seen: dict[int, StaffSummary] = {}
    for task in tasks:
        if task.assignee is not None and task.assignee.id is not None:
            seen.setdefault(task.assignee.id, task.assignee)
    return list(seen.values())


def project_summary(project: Project | ProjectRead, tasks: Sequence[TaskRead]) -> ProjectSummary:
    counts = {status: 0 for status, _ in BOARD_COLUMNS}
    for task in tasks:
        counts[_status_of(task)] += 1

    total = len(tasks)
    completed = counts[TaskStatus.DONE]
    return ProjectSummary(
        project=ProjectRead.model_validate(project),
        total_tasks=total,
        completed_tasks=completed,
        in_progress_tasks=counts[TaskStatus.IN_PROGRESS] + counts[TaskStatus.REVIEW],
        blocked_tasks=counts[TaskStatus.BLOCKED],
        todo_tasks=counts[TaskStatus.TODO],
        upcoming_tasks=upcoming_tasks(tasks),
        computed_progress=computed_progress(completed, total, project.progress_percentage),
        contributors=contributors(tasks),
    )
