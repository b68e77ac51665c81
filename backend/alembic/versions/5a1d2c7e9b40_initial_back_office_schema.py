"""Initial back office schema

Revision ID: 5a1d2c7e9b40
Revises:
Create Date: 2026-10-18

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5a1d2c7e9b40"
down_revision = None
branch_labels = None
depends_on = None


role_enum = sa.Enum("SUPER_ADMIN", "SUB_ADMIN", "DEVELOPER", "CUSTOMER", name="role")


def upgrade() -> None:
    # 1) Accounts
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)
    op.create_index("ix_accounts_role", "accounts", ["role"], unique=False)

    # 2) Projects, each with at most one client
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("summary", sa.String(), nullable=False, server_default=""),
        sa.Column(
            "status",
            sa.Enum(
                "PLANNING",
                "DISCOVERY",
                "IN_DEVELOPMENT",
                "TESTING",
                "DEPLOYED",
                "ON_HOLD",
                name="projectstatus",
            ),
            nullable=False,
        ),
        sa.Column("progress_percentage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("target_date", sa.Date(), nullable=True),
        sa.Column("highlighted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("client_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["client_id"], ["accounts.id"]),
    )
    op.create_index("ix_projects_name", "projects", ["name"], unique=False)
    op.create_index("ix_projects_highlighted", "projects", ["highlighted"], unique=False)
    op.create_index("ix_projects_client_id", "projects", ["client_id"], unique=False)

    # 3) Staff assignments; one row per (project, member)
    op.create_table(
        "project_assignments",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("assignment_role", role_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.ForeignKeyConstraint(["member_id"], ["accounts.id"]),
        sa.UniqueConstraint("project_id", "member_id", name="uq_project_assignments_project_member"),
    )
    op.create_index("ix_project_assignments_project_id", "project_assignments", ["project_id"], unique=False)
    op.create_index("ix_project_assignments_member_id", "project_assignments", ["member_id"], unique=False)
    op.create_index(
        "ix_project_assignments_assignment_role",
        "project_assignments",
        ["assignment_role"],
        unique=False,
    )

    # 4) Tasks and timeline
    op.create_table(
        "project_tasks",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("TODO", "IN_PROGRESS", "REVIEW", "BLOCKED", "DONE", name="taskstatus"),
            nullable=False,
        ),
        sa.Column(
            "priority",
            sa.Enum("LOW", "MEDIUM", "HIGH", "CRITICAL", name="taskpriority"),
            nullable=False,
        ),
        sa.Column("assignee_id", sa.Integer(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.ForeignKeyConstraint(["assignee_id"], ["accounts.id"]),
    )
    op.create_index("ix_project_tasks_project_id", "project_tasks", ["project_id"], unique=False)
    op.create_index("ix_project_tasks_status", "project_tasks", ["status"], unique=False)
    op.create_index("ix_project_tasks_assignee_id", "project_tasks", ["assignee_id"], unique=False)

    op.create_table(
        "project_timeline_events",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("actor_id", sa.Integer(), nullable=True),
        sa.Column(
            "event_type",
            sa.Enum(
                "DISCOVERY",
                "PLANNING",
                "DEVELOPMENT",
                "QA",
                "DEPLOYMENT",
                "SUPPORT",
                name="timelineeventtype",
            ),
            nullable=False,
        ),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.ForeignKeyConstraint(["actor_id"], ["accounts.id"]),
    )
    op.create_index(
        "ix_project_timeline_events_project_id",
        "project_timeline_events",
        ["project_id"],
        unique=False,
    )
    op.create_index(
        "ix_project_timeline_events_occurred_at",
        "project_timeline_events",
        ["occurred_at"],
        unique=False,
    )

    # 5) Inquiries and the notification ledger
    op.create_table(
        "inquiries",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("company", sa.String(), nullable=True),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("NEW", "IN_DISCUSSION", "QUOTED", "WON", "LOST", "CLOSED", name="inquirystatus"),
            nullable=False,
        ),
        sa.Column("assigned_to", sa.String(), nullable=True),
        sa.Column("source", sa.String(), nullable=True),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
    )
    op.create_index("ix_inquiries_project_id", "inquiries", ["project_id"], unique=False)
    op.create_index("ix_inquiries_created_at", "inquiries", ["created_at"], unique=False)

    op.create_table(
        "user_notifications",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("recipient_id", sa.Integer(), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "PROJECT_ASSIGNMENT",
                "TASK_ASSIGNED",
                "TASK_UPDATED",
                "INQUIRY_SUBMITTED",
                "PROJECT_NOTE",
                "PROJECT_COMPLETED",
                name="notificationtype",
            ),
            nullable=False,
        ),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.String(), nullable=True),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("task_id", sa.Integer(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["recipient_id"], ["accounts.id"]),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.ForeignKeyConstraint(["task_id"], ["project_tasks.id"]),
    )
    op.create_index("ix_user_notifications_recipient_id", "user_notifications", ["recipient_id"], unique=False)
    op.create_index("ix_user_notifications_read", "user_notifications", ["read"], unique=False)
    op.create_index("ix_user_notifications_created_at", "user_notifications", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_table("user_notifications")
    op.drop_table("inquiries")
    op.drop_table("project_timeline_events")
    op.drop_table("project_tasks")
    op.drop_table("project_assignments")
    op.drop_table("projects")
    op.drop_table("accounts")
