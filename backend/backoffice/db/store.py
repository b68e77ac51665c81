"""Read primitives over the relational facts the core consumes.

Every builder and composer takes plain collections; this adapter is the only
place that knows how those collections come out of the database.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy import func
from sqlmodel import Session, col, select
from sqlmodel.sql.expression import SelectOfScalar

from backoffice.core.errors import InvalidOperation
from backoffice.core.roles import Role
from backoffice.models.accounts import Account
from backoffice.models.inquiries import Inquiry
from backoffice.models.notifications import Notification
from backoffice.models.projects import Project, ProjectAssignment
from backoffice.models.work import Task, TaskStatus, TimelineEvent


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(slots=True)
class Store:
    session: Session

    # accounts

    def account(self, account_id: int) -> Account | None:
        return self.session.get(Account, account_id)

    def account_by_email(self, email: str) -> Account | None:
        needle = normalize_email(email)
        return self.session.exec(select(Account).where(func.lower(col(Account.email)) == needle)).first()

    def accounts_by_role(self, role: Role) -> Sequence[Account]:
        return self.session.exec(select(Account).where(Account.role == role).order_by(col(Account.id))).all()

    def email_exists(self, email: str) -> bool:
        return self.account_by_email(email) is not None

    def accounts(self, ids: Iterable[int] | None = None) -> Sequence[Account]:
        statement = select(Account)
        if ids is not None:
            wanted = sorted(set(ids))
            if not wanted:
                return []
            statement = statement.where(col(Account.id).in_(wanted))
        return self.session.exec(statement.order_by(col(Account.id))).all()

    # projects

    def project(self, project_id: int) -> Project | None:
        return self.session.get(Project, project_id)

    def projects(self, ids: Iterable[int] | None = None) -> Sequence[Project]:
        statement = select(Project)
        if ids is not None:
            wanted = sorted(set(ids))
            if not wanted:
                return []
            statement = statement.where(col(Project.id).in_(wanted))
        return self.session.exec(statement.order_by(col(Project.id))).all()

    def projects_for_client(self, client_id: int) -> Sequence[Project]:
        return self.session.exec(
            select(Project).where(Project.client_id == client_id).order_by(col(Project.updated_at).desc())
        ).all()

    def highlighted_projects(self) -> Sequence[Project]:
        return self.session.exec(
            select(Project).where(col(Project.highlighted).is_(True)).order_by(col(Project.updated_at).desc())
        ).all()

    def project_by_name(self, name: str) -> Project | None:
        needle = name.strip().lower()
        return self.session.exec(
            select(Project).where(func.lower(col(Project.name)) == needle).order_by(col(Project.id))
        ).first()

    # assignments

    def assignment(self, assignment_id: int) -> ProjectAssignment | None:
        return self.session.get(ProjectAssignment, assignment_id)

    def assignments(self) -> Sequence[ProjectAssignment]:
        return self.session.exec(select(ProjectAssignment).order_by(col(ProjectAssignment.id))).all()

    def assignments_for_project(self, project_id: int) -> Sequence[ProjectAssignment]:
        return self.session.exec(
            select(ProjectAssignment)
            .where(ProjectAssignment.project_id == project_id)
            .order_by(col(ProjectAssignment.id))
        ).all()

    def assignments_for_projects(self, project_ids: Iterable[int]) -> Sequence[ProjectAssignment]:
        wanted = sorted(set(project_ids))
        if not wanted:
            return []
        return self.session.exec(
            select(ProjectAssignment)
            .where(col(ProjectAssignment.project_id).in_(wanted))
            .order_by(col(ProjectAssignment.id))
        ).all()

    def assignments_for_member(self, member_id: int) -> Sequence[ProjectAssignment]:
        return self.session.exec(
            select(ProjectAssignment)
            .where(ProjectAssignment.member_id == member_id)
            .order_by(col(ProjectAssignment.id))
        ).all()

    def assignments_by_role(self, role: Role) -> Sequence[ProjectAssignment]:
        return self.session.exec(
            select(ProjectAssignment)
            .where(ProjectAssignment.assignment_role == role)
            .order_by(col(ProjectAssignment.id))
        ).all()

    def assignment_for_pair(self, project_id: int, member_id: int) -> ProjectAssignment | None:
        return self.session.exec(
            select(ProjectAssignment).where(
                ProjectAssignment.project_id == project_id,
                ProjectAssignment.member_id == member_id,
            )
        ).first()

    # tasks

    def _load_tasks(self, statement: SelectOfScalar[Task]) -> Sequence[Task]:
        # Enum columns refuse values outside TaskStatus/TaskPriority while rows are fetched.
        try:
            return self.session.exec(statement).all()
        except LookupError as exc:
            raise InvalidOperation(
                f"Stored task has an unknown status or priority: {exc}",
                reason="task.status.unknown",
            ) from exc

    def task(self, task_id: int) -> Task | None:
        rows = self._load_tasks(select(Task).where(Task.id == task_id))
        return rows[0] if rows else None

    def tasks(self) -> Sequence[Task]:
        return self._load_tasks(select(Task).order_by(col(Task.id)))

    def tasks_for_project(self, project_id: int) -> Sequence[Task]:
        return self._load_tasks(
            select(Task).where(Task.project_id == project_id).order_by(col(Task.updated_at).desc())
        )

    def tasks_for_projects(self, project_ids: Iterable[int]) -> Sequence[Task]:
        wanted = sorted(set(project_ids))
        if not wanted:
            return []
        return self._load_tasks(select(Task).where(col(Task.project_id).in_(wanted)).order_by(col(Task.id)))

    def tasks_for_assignee(self, assignee_id: int) -> Sequence[Task]:
        return self._load_tasks(select(Task).where(Task.assignee_id == assignee_id).order_by(col(Task.id)))

    def tasks_for_project_status(self, project_id: int, status: TaskStatus) -> Sequence[Task]:
        return self._load_tasks(
            select(Task)
            .where(Task.project_id == project_id, Task.status == status)
            .order_by(col(Task.updated_at).desc())
        )

    # timeline / inquiries

    def timeline_for_project(self, project_id: int) -> Sequence[TimelineEvent]:
        return self.session.exec(
            select(TimelineEvent)
            .where(TimelineEvent.project_id == project_id)
            .order_by(col(TimelineEvent.occurred_at).desc(), col(TimelineEvent.id).desc())
        ).all()

    def inquiry(self, inquiry_id: int) -> Inquiry | None:
        return self.session.get(Inquiry, inquiry_id)

    def inquiries(self) -> Sequence[Inquiry]:
        return self.session.exec(
            select(Inquiry).order_by(col(Inquiry.created_at).desc(), col(Inquiry.id).desc())
        ).all()

    def inquiries_for_projects(self, project_ids: Iterable[int]) -> Sequence[Inquiry]:
        wanted = sorted(set(project_ids))
        if not wanted:
            return []
        return self.session.exec(
            select(Inquiry).where(col(Inquiry.project_id).in_(wanted)).order_by(col(Inquiry.created_at).desc())
        ).all()

    # notifications

    def notifications_for(self, recipient_id: int) -> Sequence[Notification]:
        return self.session.exec(
            select(Notification)
            .where(Notification.recipient_id == recipient_id)
            .order_by(col(Notification.created_at).desc(), col(Notification.id).desc())
        ).all()

    def unread_count(self, recipient_id: int) -> int:
        return self.session.exec(
            select(func.count())
            .select_from(Notification)
            .where(Notification.recipient_id == recipient_id, col(Notification.read).is_(False))
        ).one()

    def notification_for(self, notification_id: int, recipient_id: int) -> Notification | None:
        return self.session.exec(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.recipient_id == recipient_id,
            )
        ).first()
