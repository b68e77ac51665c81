from __future__ import annotations

from fastapi import APIRouter, Query

from backoffice.api.deps import ACTOR_DEP, ADMIN_DEP, STORE_DEP, SUPER_ADMIN_DEP
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.schemas.relationships import CustomerTree, RelationshipGraph, SubAdminTree
from backoffice.services import policy
from backoffice.services import relationship_graph as graph
from backoffice.services.accounts import require_account

router = APIRouter(tags=["relationships"])


@router.get("/super-admin/relationships", response_model=RelationshipGraph)
def organization_tree(store: Store = STORE_DEP, _actor: Account = SUPER_ADMIN_DEP) -> RelationshipGraph:
    return graph.build_organization_tree(graph.load_snapshot(store))


@router.get("/users/tree", response_model=CustomerTree)
def customer_tree(
    customer_id: int | None = Query(default=None),
    store: Store = STORE_DEP,
    actor: Account = ACTOR_DEP,
) -> CustomerTree:
    target = actor if customer_id is None or customer_id == actor.id else require_account(store, customer_id)
    policy.may_view_customer_tree(actor, target)
    return graph.build_customer_tree(target, graph.load_customer_snapshot(store, target))


@router.get("/admin/relationships", response_model=SubAdminTree)
def sub_admin_tree(
    sub_admin_id: int | None = Query(default=None),
    store: Store = STORE_DEP,
    actor: Account = ADMIN_DEP,
) -> SubAdminTree:
    target = actor if sub_admin_id is None or sub_admin_id == actor.id else require_account(store, sub_admin_id)
    policy.may_view_sub_admin_tree(actor, target)
    return graph.build_sub_admin_tree(target, graph.load_sub_admin_snapshot(store, target))
