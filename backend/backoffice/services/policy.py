"""Authorization decisions for account and assignment mutations.

Every function is pure: it looks only at the roles (and ids) it is handed and
raises on denial. Services call the relevant check before touching the
session, so a denial never leaves a partial write behind.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from backoffice.core.errors import DomainError, InvalidAssignment, InvalidOperation, PermissionDenied
from backoffice.core.roles import SUB_ADMIN_MANAGEABLE, Role


class Principal(Protocol):
    """Anything carrying an account id and a role (an ``Account`` row, an auth context)."""

    id: int | None
    role: Role


def _same(actor: Principal, target: Principal) -> bool:
    return actor.id is not None and actor.id == target.id


def may_create(actor_role: Role, requested_role: Role) -> None:
    if actor_role == Role.SUPER_ADMIN:
        return
    if actor_role == Role.SUB_ADMIN:
        if requested_role in SUB_ADMIN_MANAGEABLE:
            return
        raise PermissionDenied(
            "Sub-admins can only create developers or customers.",
            reason="account.create.role_not_allowed",
        )
    raise PermissionDenied("Only privileged users can create accounts.", reason="account.create.forbidden")


def may_manage(actor: Principal, target: Principal) -> None:
    if _same(actor, target):
        return
    if target.role == Role.SUPER_ADMIN and actor.role != Role.SUPER_ADMIN:
        raise PermissionDenied("You cannot update a super-admin account.", reason="account.manage.super_admin")
    if actor.role == Role.SUPER_ADMIN:
        return
    if actor.role == Role.SUB_ADMIN:
        if target.role in SUB_ADMIN_MANAGEABLE:
            return
        raise PermissionDenied(
            "Sub-admins can only manage developers or customers.",
            reason="account.manage.role_not_allowed",
        )
    raise PermissionDenied("Insufficient permissions to manage users.", reason="account.manage.forbidden")


def may_delete(actor: Principal, target: Principal) -> None:
    if _same(actor, target):
        raise InvalidOperation("You cannot delete your own account.", reason="account.delete.self")
    if target.role == Role.SUPER_ADMIN and actor.role != Role.SUPER_ADMIN:
        raise PermissionDenied("You cannot delete a super-admin account.", reason="account.delete.super_admin")
    if actor.role != Role.SUPER_ADMIN:
        raise PermissionDenied("Only super-admins can delete accounts.", reason="account.delete.forbidden")


def may_transition_role(actor: Principal, target: Principal, requested_role: Role) -> None:
    if Role.SUPER_ADMIN in (target.role, requested_role) and actor.role != Role.SUPER_ADMIN:
        raise PermissionDenied(
            "Only super-admins can modify super-admin roles.",
            reason="account.role.super_admin",
        )
    if actor.role == Role.SUPER_ADMIN:
        return
    if actor.role == Role.SUB_ADMIN:
        if target.role in SUB_ADMIN_MANAGEABLE and requested_role in SUB_ADMIN_MANAGEABLE:
            return
        raise PermissionDenied(
            "Sub-admins can only change between developer and customer roles.",
            reason="account.role.sub_admin_scope",
        )
    raise PermissionDenied("Insufficient permissions to change roles.", reason="account.role.forbidden")


def may_assign_to_project(assignment_role: Role, member_role: Role) -> None:
    if not assignment_role.is_assignable:
        raise InvalidAssignment(
            "Assignments only support SUB_ADMIN or DEVELOPER roles",
            reason="assignment.role_unsupported",
        )
    if member_role != assignment_role:
        raise InvalidAssignment(
            f"User role mismatch: expected {assignment_role.value} but was {member_role.value}",
            reason="assignment.role_mismatch",
        )


def require_role(actor_role: Role, *allowed: Role) -> None:
    if actor_role not in allowed:
        names = ", ".join(role.value for role in allowed)
        raise PermissionDenied(f"This action requires one of: {names}", reason="role.required")


def may_view_customer_tree(actor: Principal, target: Principal) -> None:
    if not _same(actor, target) and actor.role == Role.CUSTOMER:
        raise PermissionDenied(
            "Customers can only view their own project tree",
            reason="tree.customer.other",
        )
    if target.role != Role.CUSTOMER:
        raise InvalidOperation("Requested user is not a customer", reason="tree.customer.wrong_role")


def may_view_sub_admin_tree(actor: Principal, target: Principal) -> None:
    if not _same(actor, target) and actor.role != Role.SUPER_ADMIN:
        raise PermissionDenied(
            "Sub-admins can only view their own relationship tree",
            reason="tree.sub_admin.other",
        )
    if target.role != Role.SUB_ADMIN:
        raise InvalidOperation("Requested user is not a sub-admin", reason="tree.sub_admin.wrong_role")


def is_allowed(check: Callable[..., None], *args: Any) -> bool:
    """Boolean view of a check, for callers that branch instead of failing."""
    try:
        check(*args)
    except DomainError:
        return False
    return True
