"""Sales inquiries: public submission plus the admin follow-up workflow."""

from __future__ import annotations

from collections.abc import Iterable

from backoffice.core.errors import NotFound
from backoffice.core.logging import get_logger
from backoffice.core.roles import Role
from backoffice.core.time import utcnow
from backoffice.db import crud
from backoffice.db.store import Store, normalize_email
from backoffice.models.accounts import Account
from backoffice.models.inquiries import Inquiry
from backoffice.models.notifications import NotificationType
from backoffice.schemas.inquiries import InquiryCreate, InquiryRead, InquiryUpdate
from backoffice.services import notifications

logger = get_logger(__name__)


def to_read(inquiry: Inquiry) -> InquiryRead:
    return InquiryRead.model_validate(inquiry)


def submit_inquiry(store: Store, payload: InquiryCreate) -> InquiryRead:
    if payload.project_id is not None and store.project(payload.project_id) is None:
        raise NotFound(f"Project not found with id {payload.project_id}", reason="project.not_found")
    data = payload.model_dump()
    data["email"] = normalize_email(payload.email)
    inquiry = Inquiry(**data)
    session = store.session
    session.add(inquiry)
    session.flush()

    # Super-admins triage every new lead; inactive accounts are skipped.
    title = f"New inquiry from {inquiry.full_name}"
    for admin in store.accounts_by_role(Role.SUPER_ADMIN):
        if not admin.active:
            continue
        notifications.record(
            session,
            recipient_id=admin.id,
            type=NotificationType.INQUIRY_SUBMITTED,
            title=title,
            message=inquiry.message[:500],
            project_id=inquiry.project_id,
        )
    crud.commit_or_conflict(session, detail="Inquiry violates constraints", reason="inquiry.conflict")
    session.refresh(inquiry)
    logger.info("inquiry.submitted inquiry_id=%s project_id=%s", inquiry.id, inquiry.project_id)
    return to_read(inquiry)


def list_inquiries(store: Store) -> list[InquiryRead]:
    return [to_read(i) for i in store.inquiries()]


def update_inquiry(store: Store, inquiry_id: int, payload: InquiryUpdate, actor: Account) -> InquiryRead:
    inquiry = store.inquiry(inquiry_id)
    if inquiry is None:
        raise NotFound(f"Inquiry not found with id {inquiry_id}", reason="inquiry.not_found")
    inquiry.status = payload.status
    assigned_to = (payload.assigned_to or "").strip()
    inquiry.assigned_to = assigned_to or None
    inquiry.updated_at = utcnow()
    inquiry = crud.save(store.session, inquiry)
    logger.info(
        "inquiry.updated inquiry_id=%s status=%s actor_id=%s",
        inquiry.id,
        inquiry.status.value,
        actor.id,
    )
    return to_read(inquiry)


def inquiries_for_projects(store: Store, project_ids: Iterable[int]) -> list[InquiryRead]:
    return [to_read(i) for i in store.inquiries_for_projects(project_ids)]
