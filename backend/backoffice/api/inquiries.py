from __future__ import annotations

from fastapi import APIRouter, status

from backoffice.api.deps import ADMIN_DEP, STORE_DEP
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.schemas.inquiries import InquiryCreate, InquiryRead, InquiryUpdate
from backoffice.services import inquiries as inquiry_service

router = APIRouter(tags=["inquiries"])


@router.post("/inquiries", response_model=InquiryRead, status_code=status.HTTP_201_CREATED)
def submit_inquiry(payload: InquiryCreate, store: Store = STORE_DEP) -> InquiryRead:
    return inquiry_service.submit_inquiry(store, payload)


@router.get("/admin/inquiries", response_model=list[InquiryRead])
def list_inquiries(store: Store = STORE_DEP, _actor: Account = ADMIN_DEP) -> list[InquiryRead]:
    return inquiry_service.list_inquiries(store)


@router.patch("/admin/inquiries/{inquiry_id}", response_model=InquiryRead)
def update_inquiry(
    inquiry_id: int,
    payload: InquiryUpdate,
    store: Store = STORE_DEP,
    actor: Account = ADMIN_DEP,
) -> InquiryRead:
    return inquiry_service.update_inquiry(store, inquiry_id, payload, actor)
