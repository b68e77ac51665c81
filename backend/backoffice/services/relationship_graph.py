"""Nested organisation views rebuilt from flat project/assignment/task rows.

The builders never query anything themselves. They receive a ``GraphSnapshot``
(one consistent read of the store) and return schema objects, so the same code
serves the organisation-wide tree and the single-customer / single-sub-admin
views.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from backoffice.core.errors import InvalidOperation, ReferentialIntegrityError
from backoffice.core.logging import get_logger
from backoffice.core.roles import Role
from backoffice.db.store import Store
from backoffice.models.accounts import Account
from backoffice.models.projects import Project, ProjectAssignment
from backoffice.models.work import Task, TaskStatus
from backoffice.schemas.accounts import StaffSummary
from backoffice.schemas.relationships import (
    CustomerTree,
    ProjectTeamNode,
    RelationshipGraph,
    SubAdminTree,
)

logger = get_logger(__name__)


@dataclass(slots=True)
class GraphSnapshot:
    projects: Sequence[Project] = ()
    assignments: Sequence[ProjectAssignment] = ()
    tasks: Sequence[Task] = ()
    accounts: Sequence[Account] = ()

    _accounts_by_id: dict[int, Account] = field(init=False, repr=False)
    _projects_by_id: dict[int, Project] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._accounts_by_id = {a.id: a for a in self.accounts if a.id is not None}
        self._projects_by_id = {p.id: p for p in self.projects if p.id is not None}

    @property
    def accounts_by_id(self) -> dict[int, Account]:
        return self._accounts_by_id

    @property
    def projects_by_id(self) -> dict[int, Project]:
        return self._projects_by_id


def load_snapshot(store: Store) -> GraphSnapshot:
    """Read every fact the organisation tree needs in one pass."""
    return GraphSnapshot(
        projects=store.projects(),
        assignments=store.assignments(),
        tasks=store.tasks(),
        accounts=store.accounts(),
    )


def load_customer_snapshot(store: Store, customer: Account) -> GraphSnapshot:
    projects = store.projects_for_client(customer.id)
    project_ids = [p.id for p in projects]
    assignments = store.assignments_for_projects(project_ids)
    member_ids = {a.member_id for a in assignments} | {customer.id}
    return GraphSnapshot(
        projects=projects,
        assignments=assignments,
        tasks=store.tasks_for_projects(project_ids),
        accounts=store.accounts(member_ids),
    )


def load_sub_admin_snapshot(store: Store, sub_admin: Account) -> GraphSnapshot:
    own = [a for a in store.assignments_for_member(sub_admin.id) if a.assignment_role == Role.SUB_ADMIN]
    projects = store.projects(a.project_id for a in own)
    project_ids = [p.id for p in projects]
    # Full teams of the reached projects, not just the sub-admin's own rows.
    assignments = store.assignments_for_projects(project_ids)
    account_ids = {a.member_id for a in assignments} | {p.client_id for p in projects if p.client_id} | {sub_admin.id}
    return GraphSnapshot(
        projects=projects,
        assignments=assignments,
        tasks=store.tasks_for_projects(project_ids),
        accounts=store.accounts(account_ids),
    )


def _name_key(value: str | None) -> str:
    return (value or "").casefold()


def _resolve_account(accounts_by_id: Mapping[int, Account], account_id: int, *, context: str) -> Account:
    account = accounts_by_id.get(account_id)
    if account is None:
        logger.error("graph.dangling_account account_id=%s context=%s", account_id, context)
        raise ReferentialIntegrityError(
            f"Account {account_id} referenced by {context} does not exist",
            reason="graph.dangling_account",
        )
    return account


def _staff_list(
    assignments: Iterable[ProjectAssignment],
    accounts_by_id: Mapping[int, Account],
) -> list[StaffSummary]:
    # Keyed by account id: a member linked through several rows appears once.
    unique: dict[int, StaffSummary] = {}
    for assignment in assignments:
        if assignment.member_id in unique:
            continue
        member = _resolve_account(
            accounts_by_id,
            assignment.member_id,
            context=f"assignment {assignment.id}",
        )
        unique[assignment.member_id] = StaffSummary.from_account(member)
    return sorted(unique.values(), key=lambda s: _name_key(s.full_name))


def build_project_team_node(
    project: Project,
    assignments: Sequence[ProjectAssignment],
    tasks: Sequence[Task],
    accounts_by_id: Mapping[int, Account],
) -> ProjectTeamNode:
    sub_admin_rows = [a for a in assignments if a.assignment_role == Role.SUB_ADMIN]
    developer_rows = [a for a in assignments if a.assignment_role == Role.DEVELOPER]

    customer = None
    if project.client_id is not None:
        client = _resolve_account(accounts_by_id, project.client_id, context=f"project {project.id} client")
        customer = StaffSummary.from_account(client)

    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == TaskStatus.DONE)

    return ProjectTeamNode(
        id=project.id,
        name=project.name,
        status=project.status,
        progress_percentage=project.progress_percentage,
        summary=project.summary or "",
        target_date=project.target_date,
        customer=customer,
        sub_admins=_staff_list(sub_admin_rows, accounts_by_id),
        developers=_staff_list(developer_rows, accounts_by_id),
        total_tasks=total,
        open_tasks=total - completed,
        completed_tasks=completed,
    )


def _group_by_project(
    rows: Iterable[ProjectAssignment | Task],
    projects_by_id: Mapping[int, Project],
    *,
    kind: str,
) -> dict[int, list]:
    grouped: dict[int, list] = defaultdict(list)
    for row in rows:
        if row.project_id not in projects_by_id:
            logger.error("graph.dangling_project project_id=%s %s_id=%s", row.project_id, kind, row.id)
            raise ReferentialIntegrityError(
                f"Project {row.project_id} referenced by {kind} {row.id} does not exist",
                reason="graph.dangling_project",
            )
        grouped[row.project_id].append(row)
    return grouped


def build_project_nodes(snapshot: GraphSnapshot) -> dict[int, ProjectTeamNode]:
    """Team node per project, keyed by project id in snapshot order."""
    assignments_by_project = _group_by_project(snapshot.assignments, snapshot.projects_by_id, kind="assignment")
    tasks_by_project = _group_by_project(snapshot.tasks, snapshot.projects_by_id, kind="task")
    return {
        project.id: build_project_team_node(
            project,
            assignments_by_project.get(project.id, []),
            tasks_by_project.get(project.id, []),
            snapshot.accounts_by_id,
        )
        for project in snapshot.projects
    }


def _sorted_nodes(nodes: Iterable[ProjectTeamNode]) -> list[ProjectTeamNode]:
    return sorted(nodes, key=lambda n: _name_key(n.name))


def _dedupe_nodes(nodes: Iterable[ProjectTeamNode]) -> list[ProjectTeamNode]:
    unique: dict[int, ProjectTeamNode] = {}
    for node in nodes:
        unique.setdefault(node.id, node)
    return list(unique.values())


def _sub_admin_tree(
    sub_admin: Account,
    assignments: Iterable[ProjectAssignment],
    nodes: Mapping[int, ProjectTeamNode],
) -> SubAdminTree:
    reached = (
        nodes[a.project_id]
        for a in assignments
        if a.member_id == sub_admin.id and a.assignment_role == Role.SUB_ADMIN
    )
    return SubAdminTree(
        sub_admin=StaffSummary.from_account(sub_admin),
        projects=_sorted_nodes(_dedupe_nodes(reached)),
    )


def _unassigned(accounts: Iterable[Account], assignments: Iterable[ProjectAssignment], role: Role) -> list[StaffSummary]:
    assigned = {a.member_id for a in assignments if a.assignment_role == role}
    pool = [StaffSummary.from_account(a) for a in accounts if a.role == role and a.id not in assigned]
    return sorted(pool, key=lambda s: _name_key(s.full_name))


def build_organization_tree(snapshot: GraphSnapshot) -> RelationshipGraph:
    nodes = build_project_nodes(snapshot)

    by_customer: dict[int, list[ProjectTeamNode]] = defaultdict(list)
    unassigned_projects: list[ProjectTeamNode] = []
    for node in nodes.values():
        if node.customer is None:
            unassigned_projects.append(node)
        else:
            by_customer[node.customer.id].append(node)

    customers = sorted(
        (
            CustomerTree(customer=group[0].customer, projects=_sorted_nodes(group))
            for group in by_customer.values()
        ),
        key=lambda tree: _name_key(tree.customer.full_name),
    )

    sub_admin_accounts = [a for a in snapshot.accounts if a.role == Role.SUB_ADMIN]
    sub_admins = sorted(
        (_sub_admin_tree(account, snapshot.assignments, nodes) for account in sub_admin_accounts),
        key=lambda tree: _name_key(tree.sub_admin.full_name),
    )

    graph = RelationshipGraph(
        customers=customers,
        sub_admins=sub_admins,
        unassigned_sub_admins=_unassigned(snapshot.accounts, snapshot.assignments, Role.SUB_ADMIN),
        unassigned_developers=_unassigned(snapshot.accounts, snapshot.assignments, Role.DEVELOPER),
        unassigned_projects=_sorted_nodes(unassigned_projects),
    )
    logger.debug(
        "graph.built projects=%s customers=%s sub_admins=%s",
        len(nodes),
        len(customers),
        len(sub_admins),
    )
    return graph


def build_customer_tree(customer: Account, snapshot: GraphSnapshot) -> CustomerTree:
    if customer.role != Role.CUSTOMER:
        raise InvalidOperation("Requested user is not a customer", reason="tree.customer.wrong_role")
    own_projects = [p for p in snapshot.projects if p.client_id == customer.id]
    project_ids = {p.id for p in own_projects}
    scoped = GraphSnapshot(
        projects=own_projects,
        assignments=[a for a in snapshot.assignments if a.project_id in project_ids],
        tasks=[t for t in snapshot.tasks if t.project_id in project_ids],
        accounts=list(snapshot.accounts) + [customer],
    )
    nodes = build_project_nodes(scoped)
    return CustomerTree(customer=StaffSummary.from_account(customer), projects=_sorted_nodes(nodes.values()))


def build_sub_admin_tree(sub_admin: Account, snapshot: GraphSnapshot) -> SubAdminTree:
    if sub_admin.role != Role.SUB_ADMIN:
        raise InvalidOperation("Requested user is not a sub-admin", reason="tree.sub_admin.wrong_role")
    project_ids = {
        a.project_id
        for a in snapshot.assignments
        if a.member_id == sub_admin.id and a.assignment_role == Role.SUB_ADMIN
    }
    missing = project_ids - snapshot.projects_by_id.keys()
    if missing:
        raise ReferentialIntegrityError(
            f"Projects {sorted(missing)} referenced by assignments do not exist",
            reason="graph.dangling_project",
        )
    scoped = GraphSnapshot(
        projects=[p for p in snapshot.projects if p.id in project_ids],
        assignments=[a for a in snapshot.assignments if a.project_id in project_ids],
        tasks=[t for t in snapshot.tasks if t.project_id in project_ids],
        accounts=snapshot.accounts,
    )
    nodes = build_project_nodes(scoped)
    return _sub_admin_tree(sub_admin, scoped.assignments, nodes)


def projects_for_member(
    member_id: int,
    assignments: Iterable[ProjectAssignment],
    projects_by_id: Mapping[int, Project],
) -> list[Project]:
    """Distinct projects linked to a member, in assignment order."""
    reached: dict[int, Project] = {}
    for assignment in assignments:
        if assignment.member_id != member_id or assignment.project_id in reached:
            continue
        project = projects_by_id.get(assignment.project_id)
        if project is None:
            raise ReferentialIntegrityError(
                f"Project {assignment.project_id} referenced by assignment {assignment.id} does not exist",
                reason="graph.dangling_project",
            )
        reached[assignment.project_id] = project
    return list(reached.values())
