"""Per-recipient notification ledger.

Rows are appended inside the caller's unit of work (no commit here for the
fan-out helpers) so an assignment or task write and its notification land
together or not at all.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlmodel import Session

from backoffice.core.errors import NotFound
from backoffice.core.logging import get_logger
from backoffice.core.time import utcnow
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.models.notifications import Notification, NotificationType
from backoffice.models.projects import Project
from backoffice.models.work import Task
from backoffice.schemas.notifications import NotificationFeed, NotificationRead

logger = get_logger(__name__)

FEED_LIMIT = 20


@dataclass(frozen=True)
class NotifyContext:
    event: NotificationType
    actor: Account | None
    task: Task | None = None
    project: Project | None = None


def resolve_recipients(ctx: NotifyContext, *, recipient_id: int | None = None) -> set[int]:
    recipients: set[int] = set()
    if recipient_id is not None:
        recipients.add(recipient_id)
    elif ctx.event in {NotificationType.TASK_ASSIGNED, NotificationType.TASK_UPDATED}:
        # The assignee hears about the task even when they made the change themselves.
        if ctx.task is not None and ctx.task.assignee_id is not None:
            recipients.add(ctx.task.assignee_id)
    return recipients


def build_message(ctx: NotifyContext) -> tuple[str, str]:
    actor_name = ctx.actor.full_name if ctx.actor is not None else None
    title = ctx.task.title if ctx.task is not None else ""

    if ctx.event == NotificationType.TASK_ASSIGNED:
        body = f"{actor_name} assigned a task to you." if actor_name else "You have a new task."
        return f"New task assigned: {title}", body

    if ctx.event == NotificationType.TASK_UPDATED:
        body = f"{actor_name} updated the task." if actor_name else "Task has been updated."
        return f"Task updated: {title}", body

    if ctx.event == NotificationType.PROJECT_ASSIGNMENT and ctx.project is not None:
        body = f"{actor_name} added you to the project team." if actor_name else "You were added to a project."
        return f"Assigned to project: {ctx.project.name}", body

    project_name = ctx.project.name if ctx.project is not None else "project"
    return f"Update on {project_name}", "There is a new update."


def record(
    session: Session,
    *,
    recipient_id: int,
    type: NotificationType,
    title: str,
    message: str | None = None,
    project_id: int | None = None,
    task_id: int | None = None,
) -> Notification:
    notification = Notification(
        recipient_id=recipient_id,
        type=type,
        title=title[:200],
        message=message,
        project_id=project_id,
        task_id=task_id,
        read=False,
        created_at=utcnow(),
    )
    session.add(notification)
    return notification


def notify(session: Session, ctx: NotifyContext, *, recipient_id: int | None = None) -> list[Notification]:
    recipients = resolve_recipients(ctx, recipient_id=recipient_id)
    if not recipients:
        return []
    title, message = build_message(ctx)
    project_id = ctx.project.id if ctx.project is not None else (ctx.task.project_id if ctx.task else None)
    task_id = ctx.task.id if ctx.task is not None else None
    created = [
        record(
            session,
            recipient_id=rid,
            type=ctx.event,
            title=title,
            message=message,
            project_id=project_id,
            task_id=task_id,
        )
        for rid in sorted(recipients)
    ]
    logger.info("notification.queued event=%s recipients=%s", ctx.event.value, sorted(recipients))
    return created


def notify_task_assigned(session: Session, task: Task, actor: Account | None) -> list[Notification]:
    return notify(session, NotifyContext(event=NotificationType.TASK_ASSIGNED, actor=actor, task=task))


def notify_task_updated(session: Session, task: Task, actor: Account | None) -> list[Notification]:
    return notify(session, NotifyContext(event=NotificationType.TASK_UPDATED, actor=actor, task=task))


def notify_project(
    session: Session,
    project: Project,
    recipient_id: int,
    type: NotificationType,
    title: str,
    message: str | None = None,
) -> Notification:
    return record(
        session,
        recipient_id=recipient_id,
        type=type,
        title=title,
        message=message,
        project_id=project.id,
    )


def to_read(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


def feed(store: Store, recipient: Account, *, limit: int | None = None) -> NotificationFeed:
    rows = store.notifications_for(recipient.id)
    if limit is not None:
        rows = rows[:limit]
    return NotificationFeed(
        notifications=[to_read(n) for n in rows],
        unread_count=store.unread_count(recipient.id),
    )


def unread_count(store: Store, recipient: Account) -> int:
    return store.unread_count(recipient.id)


def mark_read(store: Store, recipient: Account, notification_id: int) -> NotificationRead:
    notification = store.notification_for(notification_id, recipient.id)
    if notification is None:
        raise NotFound("Notification not found", reason="notification.not_found")
    if not notification.read:
        notification.read = True
        store.session.add(notification)
        store.session.commit()
        store.session.refresh(notification)
    return to_read(notification)


def mark_all_read(store: Store, recipient: Account) -> int:
    changed = 0
    for notification in store.notifications_for(recipient.id):
        if notification.read:
            continue
        notification.read = True
        store.session.add(notification)
        changed += 1
    store.session.commit()
    logger.info("notification.read_all recipient_id=%s changed=%s", recipient.id, changed)
    return changed
