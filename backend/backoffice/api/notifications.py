from __future__ import annotations

from fastapi import APIRouter

from backoffice.api.deps import ACTOR_DEP, STORE_DEP
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.schemas.common import OkResponse
from backoffice.schemas.notifications import NotificationFeed, NotificationRead
from backoffice.services import notifications as ledger

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationFeed)
def feed(store: Store = STORE_DEP, actor: Account = ACTOR_DEP) -> NotificationFeed:
    return ledger.feed(store, actor)


@router.post("/read-all", response_model=OkResponse)
def mark_all_read(store: Store = STORE_DEP, actor: Account = ACTOR_DEP) -> OkResponse:
    ledger.mark_all_read(store, actor)
    return OkResponse()


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_read(notification_id: int, store: Store = STORE_DEP, actor: Account = ACTOR_DEP) -> NotificationRead:
    return ledger.mark_read(store, actor, notification_id)
