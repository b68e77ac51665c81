from __future__ import annotations

from backoffice.core.errors import InvalidOperation, NotFound
from backoffice.core.logging import get_logger
from backoffice.core.roles import Role
from backoffice.core.time import utcnow
from backoffice.db import crud
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.models.notifications import NotificationType
from backoffice.models.projects import Project, ProjectStatus
from backoffice.schemas.projects import ProjectCreate, ProjectRead, ProjectUpdate
from backoffice.services import notifications
from backoffice.services.accounts import require_account
from backoffice.services.tasks import require_project
from backoffice.services.workspace import assigned_projects

logger = get_logger(__name__)

SUBMITTED_PROGRESS = 5
# Columns that cannot be cleared through an update; an explicit null leaves them as they are.
_REQUIRED_FIELDS = frozenset({"name", "summary", "status", "progress_percentage", "highlighted"})


def to_read(project: Project) -> ProjectRead:
    return ProjectRead.model_validate(project)


def _check_client(store: Store, client_id: int | None) -> None:
    if client_id is None:
        return
    client = require_account(store, client_id)
    if client.role != Role.CUSTOMER:
        raise InvalidOperation("Project clients must be customer accounts", reason="project.client.wrong_role")


def is_complete(project: Project) -> bool:
    return project.status == ProjectStatus.DEPLOYED or project.progress_percentage >= 100


def create_project(store: Store, payload: ProjectCreate, actor: Account) -> Project:
    _check_client(store, payload.client_id)
    project = crud.save(store.session, Project(**payload.model_dump()))
    logger.info("project.created project_id=%s actor_id=%s", project.id, actor.id)
    return project


def submit_project(store: Store, payload: ProjectCreate, customer: Account) -> Project:
    """A customer's own request: always theirs, always starting from planning."""
    project = Project(
        name=payload.name,
        summary=payload.summary,
        status=ProjectStatus.PLANNING,
        progress_percentage=SUBMITTED_PROGRESS,
        start_date=utcnow().date(),
        target_date=payload.target_date,
        highlighted=False,
        client_id=customer.id,
    )
    project = crud.save(store.session, project)
    logger.info("project.submitted project_id=%s customer_id=%s", project.id, customer.id)
    return project


def _notify_completion(store: Store, project: Project) -> set[int]:
    notified: set[int] = set()
    if project.client_id is not None:
        notifications.notify_project(
            store.session,
            project,
            project.client_id,
            NotificationType.PROJECT_COMPLETED,
            f"Launch complete: {project.name}",
            "Your project is live and ready for review.",
        )
        notified.add(project.client_id)
    for assignment in store.assignments_for_project(project.id):
        if assignment.member_id in notified:
            continue
        notifications.notify_project(
            store.session,
            project,
            assignment.member_id,
            NotificationType.PROJECT_COMPLETED,
            f"Project shipped: {project.name}",
            "Celebrate the delivery! The customer has been notified.",
        )
        notified.add(assignment.member_id)
    return notified


def update_project(store: Store, project_id: int, payload: ProjectUpdate, actor: Account) -> Project:
    project = require_project(store, project_id)
    was_complete = is_complete(project)

    data = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key not in _REQUIRED_FIELDS
    }
    if "client_id" in data:
        _check_client(store, data["client_id"])
    for key, value in data.items():
        setattr(project, key, value)
    project.updated_at = utcnow()

    if not was_complete and is_complete(project):
        # Queued in the same unit of work as the project row.
        notified = _notify_completion(store, project)
        logger.info("project.completed project_id=%s notified=%s", project.id, sorted(notified))

    project = crud.save(store.session, project)
    logger.info("project.updated project_id=%s actor_id=%s fields=%s", project.id, actor.id, sorted(data))
    return project


def list_projects(store: Store, actor: Account) -> list[Project]:
    if actor.role == Role.CUSTOMER:
        return list(store.projects_for_client(actor.id))
    if actor.role == Role.DEVELOPER:
        return assigned_projects(store, actor)
    return list(store.projects())


def highlighted_projects(store: Store) -> list[Project]:
    return list(store.highlighted_projects())


def find_by_name(store: Store, name: str) -> Project:
    project = store.project_by_name(name)
    if project is None:
        raise NotFound(f"Project not found with name {name!r}", reason="project.not_found")
    return project
