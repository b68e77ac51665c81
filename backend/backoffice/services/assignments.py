from __future__ import annotations

from backoffice.core.errors import InvalidOperation, NotFound
from backoffice.core.logging import get_logger
from backoffice.core.roles import Role
from backoffice.db import crud
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.models.notifications import NotificationType
from backoffice.models.projects import Project, ProjectAssignment
from backoffice.schemas.projects import AssignmentCreate, AssignmentRead
from backoffice.services import notifications, policy
from backoffice.services.accounts import require_account
from backoffice.services.tasks import require_project
from backoffice.services.workspace import assigned_projects

logger = get_logger(__name__)

_ALREADY_ASSIGNED = "Member already assigned to project"


def to_read(assignment: ProjectAssignment) -> AssignmentRead:
    return AssignmentRead.model_validate(assignment)


def assign_member(store: Store, payload: AssignmentCreate, actor: Account) -> ProjectAssignment:
    policy.require_role(actor.role, Role.SUPER_ADMIN)
    project = require_project(store, payload.project_id)
    member = require_account(store, payload.member_id)
    policy.may_assign_to_project(payload.assignment_role, member.role)

    # Fast path only; the unique constraint is what actually holds under concurrency.
    if store.assignment_for_pair(project.id, member.id) is not None:
        raise InvalidOperation(_ALREADY_ASSIGNED, reason="assignment.duplicate")

    assignment = ProjectAssignment(
        project_id=project.id,
        member_id=member.id,
        assignment_role=payload.assignment_role,
    )
    session = store.session
    session.add(assignment)
    notifications.notify(
        session,
        notifications.NotifyContext(event=NotificationType.PROJECT_ASSIGNMENT, actor=actor, project=project),
        recipient_id=member.id,
    )
    crud.commit_or_conflict(session, detail=_ALREADY_ASSIGNED, reason="assignment.duplicate")
    session.refresh(assignment)
    logger.info(
        "assignment.created assignment_id=%s project_id=%s member_id=%s role=%s",
        assignment.id,
        project.id,
        member.id,
        assignment.assignment_role.value,
    )
    return assignment


def remove_assignment(store: Store, assignment_id: int, actor: Account) -> None:
    policy.require_role(actor.role, Role.SUPER_ADMIN)
    assignment = store.assignment(assignment_id)
    if assignment is None:
        raise NotFound(f"Assignment not found with id {assignment_id}", reason="assignment.not_found")
    crud.delete(store.session, assignment)
    logger.info("assignment.removed assignment_id=%s actor_id=%s", assignment_id, actor.id)


def assignments_for_project(store: Store, project_id: int) -> list[ProjectAssignment]:
    require_project(store, project_id)
    return list(store.assignments_for_project(project_id))


def projects_for_member(store: Store, member_id: int) -> list[Project]:
    member = require_account(store, member_id)
    return assigned_projects(store, member)


def assignments_by_role(store: Store, role: Role) -> list[ProjectAssignment]:
    return list(store.assignments_by_role(role))
