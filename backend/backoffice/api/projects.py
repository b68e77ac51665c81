from __future__ import annotations

from fastapi import APIRouter, Query, status

from backoffice.api.deps import ACTOR_DEP, ADMIN_DEP, STORE_DEP, SUPER_ADMIN_DEP
from backoffice.core.roles import Role
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.schemas.common import OkResponse
from backoffice.schemas.projects import AssignmentCreate, AssignmentRead, ProjectCreate, ProjectRead, ProjectUpdate
from backoffice.schemas.tasks import TimelineEventCreate, TimelineEventRead
from backoffice.services import assignments as assignment_service
from backoffice.services import policy
from backoffice.services import projects as project_service
from backoffice.services import timeline as timeline_service
from backoffice.services.tasks import assert_assigned, assert_client, require_project

router = APIRouter(tags=["projects"])


@router.get("/projects/highlighted", response_model=list[ProjectRead])
def highlighted_projects(store: Store = STORE_DEP) -> list[ProjectRead]:
    return [project_service.to_read(p) for p in project_service.highlighted_projects(store)]


@router.get("/projects", response_model=list[ProjectRead])
def list_projects(store: Store = STORE_DEP, actor: Account = ACTOR_DEP) -> list[ProjectRead]:
    return [project_service.to_read(p) for p in project_service.list_projects(store, actor)]


@router.post("/projects", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(payload: ProjectCreate, store: Store = STORE_DEP, actor: Account = ACTOR_DEP) -> ProjectRead:
    if actor.role == Role.CUSTOMER:
        return project_service.to_read(project_service.submit_project(store, payload, actor))
    policy.require_role(actor.role, Role.SUPER_ADMIN, Role.SUB_ADMIN)
    return project_service.to_read(project_service.create_project(store, payload, actor))


@router.get("/admin/projects/lookup", response_model=ProjectRead)
def lookup_project(name: str = Query(min_length=1), store: Store = STORE_DEP, _actor: Account = ADMIN_DEP) -> ProjectRead:
    return project_service.to_read(project_service.find_by_name(store, name))


@router.patch("/projects/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    store: Store = STORE_DEP,
    actor: Account = ADMIN_DEP,
) -> ProjectRead:
    return project_service.to_read(project_service.update_project(store, project_id, payload, actor))


@router.get("/projects/{project_id}", response_model=ProjectRead)
def get_project(project_id: int, store: Store = STORE_DEP, actor: Account = ACTOR_DEP) -> ProjectRead:
    project = require_project(store, project_id)
    if actor.role == Role.CUSTOMER:
        assert_client(project, actor)
    elif actor.role == Role.DEVELOPER:
        assert_assigned(store, project, actor)
    return project_service.to_read(project)


@router.get("/projects/{project_id}/timeline", response_model=list[TimelineEventRead])
def project_timeline(project_id: int, store: Store = STORE_DEP, actor: Account = ACTOR_DEP) -> list[TimelineEventRead]:
    project = require_project(store, project_id)
    if actor.role == Role.CUSTOMER:
        assert_client(project, actor)
    elif actor.role == Role.DEVELOPER:
        assert_assigned(store, project, actor)
    return timeline_service.timeline_for_project(store, project)


@router.post(
    "/admin/projects/{project_id}/timeline",
    response_model=TimelineEventRead,
    status_code=status.HTTP_201_CREATED,
)
def record_timeline_event(
    project_id: int,
    payload: TimelineEventCreate,
    store: Store = STORE_DEP,
    actor: Account = ADMIN_DEP,
) -> TimelineEventRead:
    project = require_project(store, project_id)
    return timeline_service.record_event(
        store,
        project,
        payload.event_type,
        payload.title,
        payload.description,
        actor,
    )


@router.post(
    "/super-admin/project-assignments",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def assign_member(payload: AssignmentCreate, store: Store = STORE_DEP, actor: Account = SUPER_ADMIN_DEP) -> AssignmentRead:
    return assignment_service.to_read(assignment_service.assign_member(store, payload, actor))


@router.delete("/super-admin/project-assignments/{assignment_id}", response_model=OkResponse)
def remove_assignment(assignment_id: int, store: Store = STORE_DEP, actor: Account = SUPER_ADMIN_DEP) -> OkResponse:
    assignment_service.remove_assignment(store, assignment_id, actor)
    return OkResponse()


@router.get("/admin/projects/{project_id}/assignments", response_model=list[AssignmentRead])
def project_assignments(project_id: int, store: Store = STORE_DEP, _actor: Account = ADMIN_DEP) -> list[AssignmentRead]:
    return [assignment_service.to_read(a) for a in assignment_service.assignments_for_project(store, project_id)]


@router.get("/admin/members/{member_id}/projects", response_model=list[ProjectRead])
def member_projects(member_id: int, store: Store = STORE_DEP, _actor: Account = ADMIN_DEP) -> list[ProjectRead]:
    return [project_service.to_read(p) for p in assignment_service.projects_for_member(store, member_id)]


@router.get("/super-admin/project-assignments", response_model=list[AssignmentRead])
def assignments_by_role(
    role: Role = Query(),
    store: Store = STORE_DEP,
    _actor: Account = SUPER_ADMIN_DEP,
) -> list[AssignmentRead]:
    return [assignment_service.to_read(a) for a in assignment_service.assignments_by_role(store, role)]
