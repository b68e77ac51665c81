from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from backoffice.core.logging import get_logger
from backoffice.core.roles import Role
from backoffice.db.session import get_session
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.services import policy

logger = get_logger(__name__)

ACTOR_HEADER = "X-Actor-Id"


def get_store(session: Session = Depends(get_session)) -> Store:
    return Store(session)


def get_actor(
    actor_id: int | None = Header(default=None, alias=ACTOR_HEADER),
    store: Store = Depends(get_store),
) -> Account:
    """Resolve the already-authenticated caller forwarded by the identity layer."""
    if actor_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"{ACTOR_HEADER} header is required")
    actor = store.account(actor_id)
    if actor is None or not actor.active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown or inactive account")
    logger.debug("auth.actor account_id=%s authority=%s", actor.id, actor.role.authority)
    return actor


def require_roles(*roles: Role) -> Callable[..., Account]:
    def _dependency(actor: Account = Depends(get_actor)) -> Account:
        policy.require_role(actor.role, *roles)
        return actor

    return _dependency


STORE_DEP = Depends(get_store)
ACTOR_DEP = Depends(get_actor)
SUPER_ADMIN_DEP = Depends(require_roles(Role.SUPER_ADMIN))
ADMIN_DEP = Depends(require_roles(Role.SUPER_ADMIN, Role.SUB_ADMIN))
DEVELOPER_DEP = Depends(require_roles(Role.DEVELOPER))
CUSTOMER_DEP = Depends(require_roles(Role.CUSTOMER))
