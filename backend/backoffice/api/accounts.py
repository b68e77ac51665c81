from __future__ import annotations

from fastapi import APIRouter, status

from backoffice.api.deps import ACTOR_DEP, ADMIN_DEP, STORE_DEP, SUPER_ADMIN_DEP
from backoffice.core.roles import Role
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.schemas.accounts import (
    AccountCreate,
    AccountRead,
    AccountStatusUpdate,
    AccountUpdate,
    CustomerRegister,
    StaffCreate,
)
from backoffice.schemas.common import OkResponse
from backoffice.services import accounts as account_service

router = APIRouter(tags=["accounts"])


@router.post("/auth/register", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
def register(payload: CustomerRegister, store: Store = STORE_DEP) -> AccountRead:
    account = account_service.register_customer(store, full_name=payload.full_name, email=payload.email)
    return account_service.to_read(account)


@router.get("/users/me", response_model=AccountRead)
def me(actor: Account = ACTOR_DEP) -> AccountRead:
    return account_service.to_read(actor)


@router.get("/admin/user-management/staff", response_model=list[AccountRead])
def list_staff(store: Store = STORE_DEP, _actor: Account = ADMIN_DEP) -> list[AccountRead]:
    return [account_service.to_read(a) for a in account_service.list_staff(store)]


@router.get("/admin/user-management/customers", response_model=list[AccountRead])
def list_customers(store: Store = STORE_DEP, _actor: Account = ADMIN_DEP) -> list[AccountRead]:
    return [account_service.to_read(a) for a in account_service.list_by_role(store, Role.CUSTOMER)]


@router.post("/admin/user-management/users", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: AccountCreate, store: Store = STORE_DEP, actor: Account = ADMIN_DEP) -> AccountRead:
    return account_service.to_read(account_service.create_account(store, payload, actor))


@router.patch("/admin/user-management/users/{user_id}", response_model=AccountRead)
def update_user(
    user_id: int,
    payload: AccountUpdate,
    store: Store = STORE_DEP,
    actor: Account = ADMIN_DEP,
) -> AccountRead:
    return account_service.to_read(account_service.update_account(store, user_id, payload, actor))


@router.patch("/admin/user-management/users/{user_id}/status", response_model=AccountRead)
def update_user_status(
    user_id: int,
    payload: AccountStatusUpdate,
    store: Store = STORE_DEP,
    actor: Account = ADMIN_DEP,
) -> AccountRead:
    return account_service.to_read(account_service.update_status(store, user_id, payload, actor))


@router.delete("/admin/user-management/users/{user_id}", response_model=OkResponse)
def delete_user(user_id: int, store: Store = STORE_DEP, actor: Account = ADMIN_DEP) -> OkResponse:
    account_service.delete_account(store, user_id, actor)
    return OkResponse()


@router.post("/super-admin/staff", response_model=AccountRead, status_code=status.HTTP_201_CREATED)
def create_staff(payload: StaffCreate, store: Store = STORE_DEP, actor: Account = SUPER_ADMIN_DEP) -> AccountRead:
    account = account_service.create_staff_member(
        store,
        full_name=payload.full_name,
        email=payload.email,
        role=payload.role,
        actor=actor,
    )
    return account_service.to_read(account)


@router.get("/super-admin/staff/sub-admins", response_model=list[AccountRead])
def list_sub_admins(store: Store = STORE_DEP, _actor: Account = SUPER_ADMIN_DEP) -> list[AccountRead]:
    return [account_service.to_read(a) for a in account_service.list_by_role(store, Role.SUB_ADMIN)]


@router.get("/super-admin/staff/developers", response_model=list[AccountRead])
def list_developers(store: Store = STORE_DEP, _actor: Account = SUPER_ADMIN_DEP) -> list[AccountRead]:
    return [account_service.to_read(a) for a in account_service.list_by_role(store, Role.DEVELOPER)]
