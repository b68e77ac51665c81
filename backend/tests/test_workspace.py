# ruff: noqa

from datetime import datetime, timedelta

from backoffice.core.roles import Role
from backoffice.models.accounts import Account
from backoffice.models.inquiries import InquiryStatus
from backoffice.models.notifications import NotificationType
from backoffice.models.projects import Project
from backoffice.models.work import TaskStatus, TimelineEventType
from backoffice.schemas.accounts import StaffSummary
from backoffice.schemas.inquiries import InquiryRead
from backoffice.schemas.notifications import NotificationRead
from backoffice.schemas.tasks import TaskRead, TimelineEventRead
from backoffice.services.workspace import compose_workspace

BASE = datetime(2026, 5, 1, 9, 0)


def _developer() -> Account:
    return Account(id=7, full_name="Dana Dev", email="dana@example.com", role=Role.DEVELOPER)


def _task(task_id: int, project: Project, status: TaskStatus, assignee: Account) -> TaskRead:
    return TaskRead(
        id=task_id,
        project_id=project.id,
        project_name=project.name,
        title=f"Task {task_id}",
        status=status,
        assignee=StaffSummary.from_account(assignee),
        updated_at=BASE,
    )


def _event(event_id: int, occurred_at: datetime) -> TimelineEventRead:
    return TimelineEventRead(
        id=event_id,
        project_id=1,
        event_type=TimelineEventType.DEVELOPMENT,
        title=f"Event {event_id}",
        occurred_at=occurred_at,
    )


def _inquiry(inquiry_id: int, created_at: datetime) -> InquiryRead:
    return InquiryRead(
        id=inquiry_id,
        full_name="Prospect",
        email="lead@example.com",
        message="Can you build this?",
        status=InquiryStatus.NEW,
        project_id=1,
        created_at=created_at,
    )


def _notification(notification_id: int) -> NotificationRead:
    return NotificationRead(
        id=notification_id,
        type=NotificationType.TASK_ASSIGNED,
        title=f"Note {notification_id}",
        read=False,
        created_at=BASE,
    )


def test_progress_uses_task_ratio_or_stored_value():
    dev = _developer()
    x = Project(id=1, name="X", progress_percentage=10)
    y = Project(id=2, name="Y", progress_percentage=40)
    statuses = [TaskStatus.DONE, TaskStatus.DONE, TaskStatus.DONE, TaskStatus.TODO, TaskStatus.IN_PROGRESS]
    tasks = [_task(i, x, s, dev) for i, s in enumerate(statuses, start=1)]

    workspace = compose_workspace(
        dev,
        tasks=tasks,
        projects=[x, y],
        timeline_events=[],
        inquiries=[],
        notifications=[],
        unread_count=0,
    )

    by_name = {s.project.name: s for s in workspace.project_summaries}
    assert by_name["X"].computed_progress == 60
    assert by_name["Y"].computed_progress == 40
    assert by_name["Y"].total_tasks == 0
    assert len(workspace.task_board.done) == 3
    assert [p.name for p in workspace.assigned_projects] == ["X", "Y"]
    assert [c.id for c in by_name["X"].contributors] == [dev.id]


def test_recent_events_sorted_and_limited():
    events = [_event(i, BASE + timedelta(minutes=i)) for i in range(1, 26)]
    workspace = compose_workspace(
        _developer(),
        tasks=[],
        projects=[],
        timeline_events=events,
        inquiries=[],
        notifications=[],
        unread_count=0,
    )
    assert len(workspace.recent_events) == 20
    assert workspace.recent_events[0].id == 25
    assert workspace.recent_events[-1].id == 6


def test_equal_timestamps_keep_arrival_order():
    events = [_event(1, BASE), _event(2, BASE), _event(3, BASE + timedelta(hours=1))]
    workspace = compose_workspace(
        _developer(),
        tasks=[],
        projects=[],
        timeline_events=events,
        inquiries=[],
        notifications=[],
        unread_count=0,
    )
    assert [e.id for e in workspace.recent_events] == [3, 1, 2]


def test_inquiries_and_notifications_are_capped():
    inquiries = [_inquiry(i, BASE + timedelta(days=i)) for i in range(1, 23)]
    notifications = [_notification(i) for i in range(1, 31)]
    workspace = compose_workspace(
        _developer(),
        tasks=[],
        projects=[],
        timeline_events=[],
        inquiries=inquiries,
        notifications=notifications,
        unread_count=30,
    )
    assert len(workspace.recent_inquiries) == 20
    assert workspace.recent_inquiries[0].id == 22
    assert [n.id for n in workspace.notifications] == list(range(1, 21))
    assert workspace.unread_notifications == 30


def test_empty_workspace():
    workspace = compose_workspace(
        _developer(),
        tasks=[],
        projects=[],
        timeline_events=[],
        inquiries=[],
        notifications=[],
        unread_count=0,
    )
    assert workspace.project_summaries == []
    assert workspace.task_board.done == []
    assert workspace.unread_notifications == 0
