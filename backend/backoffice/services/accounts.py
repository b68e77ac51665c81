"""Account writes. Each entry point runs the policy check before touching the session."""

from __future__ import annotations

from backoffice.core.errors import InvalidOperation, NotFound
from backoffice.core.logging import get_logger
from backoffice.core.roles import Role
from backoffice.core.time import utcnow
from backoffice.db import crud
from backoffice.db.store import Store, normalize_email
from backoffice.models.accounts import Account
from backoffice.schemas.accounts import AccountCreate, AccountRead, AccountStatusUpdate, AccountUpdate
from backoffice.services import policy

logger = get_logger(__name__)

_DUPLICATE_EMAIL = "An account with that email already exists."


def to_read(account: Account) -> AccountRead:
    return AccountRead.model_validate(account)


def require_account(store: Store, account_id: int) -> Account:
    account = store.account(account_id)
    if account is None:
        raise NotFound(f"User not found with id {account_id}", reason="account.not_found")
    return account


def _insert(store: Store, *, full_name: str, email: str, role: Role) -> Account:
    email = normalize_email(email)
    if store.email_exists(email):
        raise InvalidOperation(_DUPLICATE_EMAIL, reason="account.email_taken")
    account = Account(full_name=full_name.strip(), email=email, role=role, active=True)
    account = crud.save(store.session, account, detail=_DUPLICATE_EMAIL, reason="account.email_taken")
    logger.info("account.created account_id=%s role=%s", account.id, role.value)
    return account


def create_account(store: Store, payload: AccountCreate, actor: Account) -> Account:
    policy.may_create(actor.role, payload.role)
    return _insert(store, full_name=payload.full_name, email=payload.email, role=payload.role)


def register_customer(store: Store, *, full_name: str, email: str) -> Account:
    return _insert(store, full_name=full_name, email=email, role=Role.CUSTOMER)


def create_staff_member(store: Store, *, full_name: str, email: str, role: Role, actor: Account) -> Account:
    policy.require_role(actor.role, Role.SUPER_ADMIN)
    if not role.is_staff:
        raise InvalidOperation(
            "Only sub-admin or developer accounts can be provisioned",
            reason="account.staff.role_unsupported",
        )
    return _insert(store, full_name=full_name, email=email, role=role)


def ensure_super_admin(store: Store, *, full_name: str, email: str) -> Account:
    existing = store.account_by_email(email)
    if existing is not None:
        return existing
    return _insert(store, full_name=full_name, email=email, role=Role.SUPER_ADMIN)


def update_account(store: Store, account_id: int, payload: AccountUpdate, actor: Account) -> Account:
    target = require_account(store, account_id)
    policy.may_manage(actor, target)

    data = payload.model_dump(exclude_unset=True)
    new_role = data.get("role")
    if new_role is not None and new_role != target.role:
        policy.may_transition_role(actor, target, new_role)

    full_name = (data.get("full_name") or "").strip()
    if full_name:
        target.full_name = full_name
    if data.get("email") is not None:
        email = normalize_email(data["email"])
        if email != target.email and store.email_exists(email):
            raise InvalidOperation("Another user with that email already exists.", reason="account.email_taken")
        target.email = email
    if new_role is not None and new_role != target.role:
        logger.info(
            "account.role_changed account_id=%s from=%s to=%s actor_id=%s",
            target.id,
            target.role.value,
            new_role.value,
            actor.id,
        )
        target.role = new_role
    target.updated_at = utcnow()
    return crud.save(store.session, target, detail=_DUPLICATE_EMAIL, reason="account.email_taken")


def update_status(store: Store, account_id: int, payload: AccountStatusUpdate, actor: Account) -> Account:
    target = require_account(store, account_id)
    policy.may_manage(actor, target)
    target.active = bool(payload.active)
    target.updated_at = utcnow()
    logger.info("account.status account_id=%s active=%s actor_id=%s", target.id, target.active, actor.id)
    return crud.save(store.session, target)


def delete_account(store: Store, account_id: int, actor: Account) -> None:
    target = require_account(store, account_id)
    policy.may_delete(actor, target)
    crud.delete(
        store.session,
        target,
        detail="Account still has projects, tasks or notifications attached.",
        reason="account.delete.referenced",
    )
    logger.info("account.deleted account_id=%s actor_id=%s", account_id, actor.id)


def list_by_role(store: Store, role: Role) -> list[Account]:
    return list(store.accounts_by_role(role))


def list_staff(store: Store) -> list[Account]:
    return [a for a in store.accounts() if a.role.is_staff]
