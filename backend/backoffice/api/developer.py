from __future__ import annotations

from fastapi import APIRouter

from backoffice.api.deps import DEVELOPER_DEP, STORE_DEP
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.schemas.projects import ProjectRead
from backoffice.schemas.workspace import DeveloperWorkspace
from backoffice.services import projects as project_service
from backoffice.services import workspace as workspace_service

router = APIRouter(prefix="/developer", tags=["developer"])


@router.get("/projects", response_model=list[ProjectRead])
def my_projects(store: Store = STORE_DEP, actor: Account = DEVELOPER_DEP) -> list[ProjectRead]:
    return [project_service.to_read(p) for p in workspace_service.assigned_projects(store, actor)]


@router.get("/workspace", response_model=DeveloperWorkspace)
def my_workspace(store: Store = STORE_DEP, actor: Account = DEVELOPER_DEP) -> DeveloperWorkspace:
    return workspace_service.load_workspace(store, actor)
