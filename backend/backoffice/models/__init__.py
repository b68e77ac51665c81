from backoffice.models.accounts import Account
from backoffice.models.inquiries import Inquiry, InquiryStatus
from backoffice.models.notifications import Notification, NotificationType
from backoffice.models.projects import Project, ProjectAssignment, ProjectStatus
from backoffice.models.work import Task, TaskPriority, TaskStatus, TimelineEvent, TimelineEventType

__all__ = [
    "Account",
    "Inquiry",
    "InquiryStatus",
    "Notification",
    "NotificationType",
    "Project",
    "ProjectAssignment",
    "ProjectStatus",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TimelineEvent",
    "TimelineEventType",
]
