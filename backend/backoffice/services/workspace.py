"""Developer dashboard payload.

``compose_workspace`` is a pure function over collections that were already
fetched; ``load_workspace`` is the one place that reads them from the store.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from backoffice.core.logging import get_logger
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.models.projects import Project
from backoffice.schemas.inquiries import InquiryRead
from backoffice.schemas.notifications import NotificationRead
from backoffice.schemas.projects import ProjectRead
from backoffice.schemas.tasks import TaskRead, TimelineEventRead
from backoffice.schemas.workspace import DeveloperWorkspace
from backoffice.services import notifications as notification_ledger
from backoffice.services import tasks as task_service
from backoffice.services import timeline as timeline_service
from backoffice.services.inquiries import inquiries_for_projects
from backoffice.services.relationship_graph import projects_for_member
from backoffice.services.task_board import board_for, project_summary

logger = get_logger(__name__)

RECENT_EVENTS_LIMIT = 20
RECENT_INQUIRIES_LIMIT = 20
NOTIFICATIONS_LIMIT = 20


def compose_workspace(
    developer: Account,
    tasks: Sequence[TaskRead],
    projects: Sequence[Project | ProjectRead],
    timeline_events: Sequence[TimelineEventRead],
    inquiries: Sequence[InquiryRead],
    notifications: Sequence[NotificationRead],
    unread_count: int,
) -> DeveloperWorkspace:
    tasks_by_project: dict[int, list[TaskRead]] = defaultdict(list)
    for task in tasks:
        tasks_by_project[task.project_id].append(task)

    summaries = [project_summary(project, tasks_by_project.get(project.id, [])) for project in projects]

    # sorted() is stable, so equal timestamps keep arrival order.
    recent_events = sorted(timeline_events, key=lambda e: e.occurred_at, reverse=True)[:RECENT_EVENTS_LIMIT]
    recent_inquiries = sorted(inquiries, key=lambda i: i.created_at, reverse=True)[:RECENT_INQUIRIES_LIMIT]

    return DeveloperWorkspace(
        task_board=board_for(tasks),
        recent_events=recent_events,
        assigned_projects=[summary.project for summary in summaries],
        project_summaries=summaries,
        recent_inquiries=recent_inquiries,
        notifications=list(notifications[:NOTIFICATIONS_LIMIT]),
        unread_notifications=unread_count,
    )


def assigned_projects(store: Store, member: Account) -> list[Project]:
    assignments = store.assignments_for_member(member.id)
    projects = store.projects(a.project_id for a in assignments)
    return projects_for_member(member.id, assignments, {p.id: p for p in projects})


def load_workspace(store: Store, developer: Account) -> DeveloperWorkspace:
    tasks = task_service.tasks_for_developer(store, developer)
    projects = assigned_projects(store, developer)
    project_ids = [p.id for p in projects]

    events: list[TimelineEventRead] = []
    for project in projects:
        events.extend(timeline_service.timeline_for_project(store, project))

    feed = notification_ledger.feed(store, developer, limit=NOTIFICATIONS_LIMIT)
    workspace = compose_workspace(
        developer,
        tasks=tasks,
        projects=projects,
        timeline_events=events,
        inquiries=inquiries_for_projects(store, project_ids),
        notifications=feed.notifications,
        unread_count=feed.unread_count,
    )
    logger.debug(
        "workspace.composed developer_id=%s projects=%s tasks=%s",
        developer.id,
        len(projects),
        len(tasks),
    )
    return workspace
