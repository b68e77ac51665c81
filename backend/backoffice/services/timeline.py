from __future__ import annotations

from collections.abc import Mapping

from backoffice.core.logging import get_logger
from backoffice.core.time import utcnow
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.models.notifications import NotificationType
from backoffice.models.projects import Project
from backoffice.models.work import TimelineEvent, TimelineEventType
from backoffice.schemas.accounts import StaffSummary
from backoffice.schemas.tasks import TimelineEventRead
from backoffice.services import notifications

logger = get_logger(__name__)


def to_event_read(event: TimelineEvent, actors_by_id: Mapping[int, Account]) -> TimelineEventRead:
    actor = actors_by_id.get(event.actor_id) if event.actor_id is not None else None
    return TimelineEventRead(
        id=event.id,
        project_id=event.project_id,
        event_type=event.event_type,
        title=event.title,
        description=event.description,
        occurred_at=event.occurred_at,
        actor=StaffSummary.from_account(actor) if actor is not None else None,
    )


def record_event(
    store: Store,
    project: Project,
    event_type: TimelineEventType,
    title: str,
    description: str | None,
    actor: Account | None,
) -> TimelineEventRead:
    event = TimelineEvent(
        project_id=project.id,
        actor_id=actor.id if actor is not None else None,
        event_type=event_type,
        title=title,
        description=description,
        occurred_at=utcnow(),
    )
    session = store.session
    session.add(event)
    if project.client_id is not None and (actor is None or actor.id != project.client_id):
        notifications.notify_project(
            session,
            project,
            project.client_id,
            NotificationType.PROJECT_COMPLETED
            if event_type == TimelineEventType.DEPLOYMENT
            else NotificationType.PROJECT_NOTE,
            f"{project.name}: {title}",
            description,
        )
    session.commit()
    session.refresh(event)
    logger.info("timeline.recorded project_id=%s event_type=%s", project.id, event_type.value)
    return to_event_read(event, {actor.id: actor} if actor is not None else {})


def timeline_for_project(store: Store, project: Project) -> list[TimelineEventRead]:
    events = store.timeline_for_project(project.id)
    actors = store.accounts(e.actor_id for e in events if e.actor_id is not None)
    by_id = {a.id: a for a in actors}
    return [to_event_read(e, by_id) for e in events]
