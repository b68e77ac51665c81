from __future__ import annotations

from fastapi import APIRouter, Query, status

from backoffice.api.deps import ADMIN_DEP, CUSTOMER_DEP, DEVELOPER_DEP, STORE_DEP
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.models.work import TaskStatus
from backoffice.schemas.common import OkResponse
from backoffice.schemas.tasks import TaskBoard, TaskCreate, TaskRead, TaskUpdate
from backoffice.services import tasks as task_service

router = APIRouter(tags=["tasks"])


@router.get("/admin/projects/{project_id}/tasks", response_model=TaskBoard)
def admin_board(
    project_id: int,
    status_filter: TaskStatus | None = Query(default=None, alias="status"),
    store: Store = STORE_DEP,
    _actor: Account = ADMIN_DEP,
) -> TaskBoard:
    return task_service.board_for_project(store, project_id, status_filter)


@router.post("/admin/projects/{project_id}/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def admin_create_task(
    project_id: int,
    payload: TaskCreate,
    store: Store = STORE_DEP,
    actor: Account = ADMIN_DEP,
) -> TaskRead:
    return task_service.create_task(store, project_id, payload, actor)


@router.patch("/admin/tasks/{task_id}", response_model=TaskRead)
def admin_update_task(task_id: int, payload: TaskUpdate, store: Store = STORE_DEP, actor: Account = ADMIN_DEP) -> TaskRead:
    return task_service.update_task(store, task_id, payload, actor)


@router.delete("/admin/tasks/{task_id}", response_model=OkResponse)
def admin_delete_task(task_id: int, store: Store = STORE_DEP, _actor: Account = ADMIN_DEP) -> OkResponse:
    task_service.delete_task(store, task_id)
    return OkResponse()


@router.get("/developer/projects/{project_id}/tasks", response_model=TaskBoard)
def developer_board(project_id: int, store: Store = STORE_DEP, actor: Account = DEVELOPER_DEP) -> TaskBoard:
    project = task_service.require_project(store, project_id)
    task_service.assert_assigned(store, project, actor)
    return task_service.board_for_project(store, project_id)


@router.post("/developer/projects/{project_id}/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def developer_create_task(
    project_id: int,
    payload: TaskCreate,
    store: Store = STORE_DEP,
    actor: Account = DEVELOPER_DEP,
) -> TaskRead:
    if payload.assignee_id is None:
        payload = payload.model_copy(update={"assignee_id": actor.id})
    return task_service.create_task(store, project_id, payload, actor)


@router.patch("/developer/tasks/{task_id}", response_model=TaskRead)
def developer_update_task(
    task_id: int,
    payload: TaskUpdate,
    store: Store = STORE_DEP,
    actor: Account = DEVELOPER_DEP,
) -> TaskRead:
    return task_service.update_task(store, task_id, payload, actor)


@router.get("/dashboard/projects/{project_id}/tasks", response_model=TaskBoard)
def customer_board(project_id: int, store: Store = STORE_DEP, actor: Account = CUSTOMER_DEP) -> TaskBoard:
    project = task_service.require_project(store, project_id)
    task_service.assert_client(project, actor)
    return task_service.board_for_project(store, project_id)
