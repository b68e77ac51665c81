from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from sqlalchemy import update
from sqlmodel import col

from backoffice.core.errors import NotFound, PermissionDenied, ReferentialIntegrityError
from backoffice.core.logging import get_logger
from backoffice.core.roles import Role
from backoffice.core.time import utcnow
from backoffice.db import crud
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.models.notifications import Notification
from backoffice.models.projects import Project
from backoffice.models.work import Task, TaskStatus
from backoffice.schemas.accounts import StaffSummary
from backoffice.schemas.tasks import TaskBoard, TaskCreate, TaskRead, TaskUpdate
from backoffice.services import notifications
from backoffice.services.task_board import board_for

logger = get_logger(__name__)


def to_task_read(task: Task, project: Project, assignee: Account | None) -> TaskRead:
    return TaskRead(
        id=task.id,
        project_id=task.project_id,
        project_name=project.name,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        assignee=StaffSummary.from_account(assignee) if assignee is not None else None,
        updated_at=task.updated_at,
    )


def task_reads(
    tasks: Iterable[Task],
    projects_by_id: Mapping[int, Project],
    accounts_by_id: Mapping[int, Account],
) -> list[TaskRead]:
    reads: list[TaskRead] = []
    for task in tasks:
        project = projects_by_id.get(task.project_id)
        if project is None:
            raise ReferentialIntegrityError(
                f"Project {task.project_id} referenced by task {task.id} does not exist",
                reason="task.dangling_project",
            )
        assignee = None
        if task.assignee_id is not None:
            assignee = accounts_by_id.get(task.assignee_id)
            if assignee is None:
                raise ReferentialIntegrityError(
                    f"Account {task.assignee_id} referenced by task {task.id} does not exist",
                    reason="task.dangling_assignee",
                )
        reads.append(to_task_read(task, project, assignee))
    return reads


def load_task_reads(store: Store, tasks: Sequence[Task]) -> list[TaskRead]:
    projects = store.projects(t.project_id for t in tasks)
    accounts = store.accounts(t.assignee_id for t in tasks if t.assignee_id is not None)
    return task_reads(tasks, {p.id: p for p in projects}, {a.id: a for a in accounts})


def require_project(store: Store, project_id: int) -> Project:
    project = store.project(project_id)
    if project is None:
        raise NotFound(f"Project not found with id {project_id}", reason="project.not_found")
    return project


def require_task(store: Store, task_id: int) -> Task:
    task = store.task(task_id)
    if task is None:
        raise NotFound(f"Task not found with id {task_id}", reason="task.not_found")
    return task


def assert_assigned(store: Store, project: Project, member: Account) -> None:
    if store.assignment_for_pair(project.id, member.id) is None:
        raise PermissionDenied("You are not assigned to this project.", reason="project.not_assigned")


def assert_client(project: Project, customer: Account) -> None:
    if project.client_id != customer.id:
        raise PermissionDenied("This project does not belong to you.", reason="project.not_client")


def _resolve_assignee(store: Store, assignee_id: int) -> Account:
    assignee = store.account(assignee_id)
    if assignee is None:
        raise NotFound("Assignee not found", reason="task.assignee.not_found")
    return assignee


def _guard_developer_assignee(actor: Account, assignee_id: int | None) -> None:
    if actor.role == Role.DEVELOPER and assignee_id is not None and assignee_id != actor.id:
        raise PermissionDenied("Developers can only assign tasks to themselves.", reason="task.assign.other")


def create_task(store: Store, project_id: int, payload: TaskCreate, actor: Account) -> TaskRead:
    project = require_project(store, project_id)
    if actor.role == Role.DEVELOPER:
        assert_assigned(store, project, actor)
        _guard_developer_assignee(actor, payload.assignee_id)
    assignee = _resolve_assignee(store, payload.assignee_id) if payload.assignee_id is not None else None

    task = Task(
        project_id=project.id,
        title=payload.title,
        description=payload.description,
        status=payload.status,
        priority=payload.priority,
        assignee_id=assignee.id if assignee else None,
        due_date=payload.due_date,
    )
    session = store.session
    session.add(task)
    session.flush()
    if assignee is not None:
        notifications.notify_task_assigned(session, task, actor)
    crud.commit_or_conflict(session, detail="Task create violates constraints", reason="task.conflict")
    session.refresh(task)
    logger.info("task.created task_id=%s project_id=%s actor_id=%s", task.id, project.id, actor.id)
    return to_task_read(task, project, assignee)


def update_task(store: Store, task_id: int, payload: TaskUpdate, actor: Account) -> TaskRead:
    task = require_task(store, task_id)
    project = require_project(store, task.project_id)
    if actor.role == Role.DEVELOPER:
        assert_assigned(store, project, actor)
        _guard_developer_assignee(actor, payload.assignee_id)
        if payload.clear_assignee:
            raise PermissionDenied("Developers cannot remove task assignments.", reason="task.assign.clear")

    data = payload.model_dump(exclude_unset=True, exclude={"clear_assignee", "clear_due_date"})
    for key in ("title", "description", "status", "priority"):
        if data.get(key) is not None:
            setattr(task, key, data[key])
    if payload.clear_due_date:
        task.due_date = None
    elif data.get("due_date") is not None:
        task.due_date = data["due_date"]
    if data.get("assignee_id") is not None:
        task.assignee_id = _resolve_assignee(store, data["assignee_id"]).id
    elif payload.clear_assignee:
        task.assignee_id = None
    task.updated_at = utcnow()

    session = store.session
    session.add(task)
    session.flush()
    notifications.notify_task_updated(session, task, actor)
    crud.commit_or_conflict(session, detail="Task update violates constraints", reason="task.conflict")
    session.refresh(task)
    logger.info("task.updated task_id=%s actor_id=%s fields=%s", task.id, actor.id, sorted(data))

    assignee = store.account(task.assignee_id) if task.assignee_id is not None else None
    return to_task_read(task, project, assignee)


def delete_task(store: Store, task_id: int) -> None:
    task = require_task(store, task_id)
    # Keep the ledger rows; only the task link goes away.
    store.session.execute(
        update(Notification).where(col(Notification.task_id) == task_id).values(task_id=None)
    )
    crud.delete(store.session, task)
    logger.info("task.deleted task_id=%s", task_id)


def tasks_for_project(store: Store, project_id: int, status: TaskStatus | None = None) -> list[TaskRead]:
    require_project(store, project_id)
    if status is None:
        rows = store.tasks_for_project(project_id)
    else:
        rows = store.tasks_for_project_status(project_id, status)
    return load_task_reads(store, rows)


def board_for_project(store: Store, project_id: int, status: TaskStatus | None = None) -> TaskBoard:
    return board_for(tasks_for_project(store, project_id, status))


def tasks_for_developer(store: Store, developer: Account) -> list[TaskRead]:
    return load_task_reads(store, store.tasks_for_assignee(developer.id))
