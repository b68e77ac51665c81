# ruff: noqa

from sqlalchemy import text
from sqlmodel import Session

from backoffice.core.roles import Role
from backoffice.models.accounts import Account


def _seed(engine, name: str, role: Role) -> int:
    with Session(engine) as session:
        account = Account(full_name=name, email=f"{name.lower().replace(' ', '.')}@example.com", role=role)
        session.add(account)
        session.commit()
        session.refresh(account)
        return account.id


def _as(actor_id: int) -> dict[str, str]:
    return {"X-Actor-Id": str(actor_id)}


def _project(client, admin_id: int, name: str, **extra) -> dict:
    resp = client.post("/projects", json={"name": name, **extra}, headers=_as(admin_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


def _assign(client, admin_id: int, project_id: int, member_id: int, role: str):
    return client.post(
        "/super-admin/project-assignments",
        json={"project_id": project_id, "member_id": member_id, "assignment_role": role},
        headers=_as(admin_id),
    )


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_missing_actor_header_is_unauthorized(client):
    assert client.get("/users/me").status_code == 401
    assert client.get("/users/me", headers=_as(404)).status_code == 401


def test_register_and_me(client):
    resp = client.post("/auth/register", json={"full_name": "Acme Ltd", "email": " Buyer@Acme.io "})
    assert resp.status_code == 201
    body = resp.json()
    assert body["role"] == "CUSTOMER"
    assert body["email"] == "buyer@acme.io"

    me = client.get("/users/me", headers=_as(body["id"]))
    assert me.json()["id"] == body["id"]


def test_duplicate_email_conflicts(client):
    client.post("/auth/register", json={"full_name": "A", "email": "same@example.com"})
    resp = client.post("/auth/register", json={"full_name": "B", "email": "SAME@example.com"})
    assert resp.status_code == 409
    assert resp.json()["reason"] == "account.email_taken"


def test_account_creation_is_gated_by_role(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    sub = _seed(engine, "Sam Sub", Role.SUB_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)

    ok = client.post(
        "/admin/user-management/users",
        json={"full_name": "New Dev", "email": "new.dev@example.com", "role": "DEVELOPER"},
        headers=_as(sub),
    )
    assert ok.status_code == 201

    denied = client.post(
        "/admin/user-management/users",
        json={"full_name": "Peer", "email": "peer@example.com", "role": "SUB_ADMIN"},
        headers=_as(sub),
    )
    assert denied.status_code == 403
    assert denied.json()["reason"] == "account.create.role_not_allowed"

    by_dev = client.post(
        "/admin/user-management/users",
        json={"full_name": "X", "email": "x@example.com", "role": "CUSTOMER"},
        headers=_as(dev),
    )
    assert by_dev.status_code == 403

    by_root = client.post(
        "/super-admin/staff",
        json={"full_name": "Second Sub", "email": "second@example.com", "role": "SUB_ADMIN"},
        headers=_as(admin),
    )
    assert by_root.status_code == 201
    staff = client.get("/admin/user-management/staff", headers=_as(admin)).json()
    assert {s["email"] for s in staff} >= {"second@example.com", "new.dev@example.com"}


def test_sub_admin_cannot_promote_to_super_admin(client, engine):
    sub = _seed(engine, "Sam Sub", Role.SUB_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    resp = client.patch(f"/admin/user-management/users/{dev}", json={"role": "SUPER_ADMIN"}, headers=_as(sub))
    assert resp.status_code == 403

    resp = client.patch(f"/admin/user-management/users/{dev}", json={"role": "CUSTOMER"}, headers=_as(sub))
    assert resp.status_code == 200
    assert resp.json()["role"] == "CUSTOMER"


def test_delete_self_is_rejected(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    resp = client.delete(f"/admin/user-management/users/{admin}", headers=_as(admin))
    assert resp.status_code == 409
    assert resp.json()["reason"] == "account.delete.self"


def test_deactivate_blocks_access(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    resp = client.patch(f"/admin/user-management/users/{dev}/status", json={"active": False}, headers=_as(admin))
    assert resp.status_code == 200
    assert client.get("/users/me", headers=_as(dev)).status_code == 401


def test_assignment_rules(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    project = _project(client, admin, "Atlas")

    first = _assign(client, admin, project["id"], dev, "DEVELOPER")
    assert first.status_code == 201

    dup = _assign(client, admin, project["id"], dev, "DEVELOPER")
    assert dup.status_code == 409
    assert dup.json()["reason"] == "assignment.duplicate"

    other = _project(client, admin, "Borealis")
    mismatch = _assign(client, admin, other["id"], dev, "SUB_ADMIN")
    assert mismatch.status_code == 409
    assert mismatch.json()["reason"] == "assignment.role_mismatch"

    missing = _assign(client, admin, 999, dev, "DEVELOPER")
    assert missing.status_code == 404

    rows = client.get(f"/admin/projects/{project['id']}/assignments", headers=_as(admin)).json()
    assert [r["member_id"] for r in rows] == [dev]

    feed = client.get("/notifications", headers=_as(dev)).json()
    assert feed["unread_count"] == 1
    assert feed["notifications"][0]["type"] == "PROJECT_ASSIGNMENT"


def test_only_super_admin_assigns(client, engine):
    sub = _seed(engine, "Sam Sub", Role.SUB_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    project = _project(client, sub, "Atlas")
    assert _assign(client, sub, project["id"], dev, "DEVELOPER").status_code == 403


def test_developer_workspace_flow(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    project = _project(client, admin, "Atlas", progress_percentage=25)
    idle = _project(client, admin, "Borealis", progress_percentage=40)
    assert _assign(client, admin, project["id"], dev, "DEVELOPER").status_code == 201
    assert _assign(client, admin, idle["id"], dev, "DEVELOPER").status_code == 201

    created = client.post(
        f"/developer/projects/{project['id']}/tasks",
        json={"title": "Build login"},
        headers=_as(dev),
    )
    assert created.status_code == 201
    task = created.json()
    assert task["assignee"]["id"] == dev

    done = client.patch(f"/admin/tasks/{task['id']}", json={"status": "DONE"}, headers=_as(admin))
    assert done.status_code == 200

    workspace = client.get("/developer/workspace", headers=_as(dev))
    assert workspace.status_code == 200
    body = workspace.json()
    assert [t["id"] for t in body["task_board"]["done"]] == [task["id"]]
    progress = {s["project"]["name"]: s["computed_progress"] for s in body["project_summaries"]}
    assert progress == {"Atlas": 100, "Borealis": 40}
    # Two project assignments, the self-assigned task and the admin's update.
    assert body["unread_notifications"] == 4

    projects = client.get("/developer/projects", headers=_as(dev)).json()
    assert [p["name"] for p in projects] == ["Atlas", "Borealis"]


def test_developer_cannot_touch_unassigned_project(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    project = _project(client, admin, "Atlas")
    resp = client.get(f"/developer/projects/{project['id']}/tasks", headers=_as(dev))
    assert resp.status_code == 403
    resp = client.post(f"/developer/projects/{project['id']}/tasks", json={"title": "x"}, headers=_as(dev))
    assert resp.status_code == 403


def test_customer_board_and_tree(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    acme = _seed(engine, "Acme", Role.CUSTOMER)
    other = _seed(engine, "Other", Role.CUSTOMER)
    project = _project(client, admin, "Atlas", client_id=acme)
    client.post(f"/admin/projects/{project['id']}/tasks", json={"title": "Kickoff"}, headers=_as(admin))

    board = client.get(f"/dashboard/projects/{project['id']}/tasks", headers=_as(acme))
    assert board.status_code == 200
    assert len(board.json()["todo"]) == 1
    assert client.get(f"/dashboard/projects/{project['id']}/tasks", headers=_as(other)).status_code == 403

    tree = client.get("/users/tree", headers=_as(acme)).json()
    assert [p["name"] for p in tree["projects"]] == ["Atlas"]
    assert client.get(f"/users/tree?customer_id={acme}", headers=_as(other)).status_code == 403


def test_project_client_must_be_customer(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    resp = client.post("/projects", json={"name": "Atlas", "client_id": dev}, headers=_as(admin))
    assert resp.status_code == 409


def test_organization_tree_endpoint(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    sub = _seed(engine, "Sam Sub", Role.SUB_ADMIN)
    idle = _seed(engine, "Idle Sub", Role.SUB_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    project = _project(client, admin, "Atlas")
    _assign(client, admin, project["id"], sub, "SUB_ADMIN")

    graph = client.get("/super-admin/relationships", headers=_as(admin)).json()
    assert [p["name"] for p in graph["unassigned_projects"]] == ["Atlas"]
    assert [s["id"] for s in graph["unassigned_sub_admins"]] == [idle]
    assert [d["id"] for d in graph["unassigned_developers"]] == [dev]

    own = client.get("/admin/relationships", headers=_as(sub)).json()
    assert [p["name"] for p in own["projects"]] == ["Atlas"]
    assert client.get(f"/admin/relationships?sub_admin_id={idle}", headers=_as(sub)).status_code == 403
    assert client.get("/super-admin/relationships", headers=_as(sub)).status_code == 403


def test_notification_endpoints(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    first = _project(client, admin, "Atlas")
    second = _project(client, admin, "Borealis")
    _assign(client, admin, first["id"], dev, "DEVELOPER")
    _assign(client, admin, second["id"], dev, "DEVELOPER")

    feed = client.get("/notifications", headers=_as(dev)).json()
    note_id = feed["notifications"][0]["id"]
    assert client.post(f"/notifications/{note_id}/read", headers=_as(admin)).status_code == 404

    marked = client.post(f"/notifications/{note_id}/read", headers=_as(dev))
    assert marked.json()["read"] is True
    assert client.get("/notifications", headers=_as(dev)).json()["unread_count"] == 1

    client.post("/notifications/read-all", headers=_as(dev))
    assert client.get("/notifications", headers=_as(dev)).json()["unread_count"] == 0


def test_inquiry_and_timeline(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    acme = _seed(engine, "Acme", Role.CUSTOMER)
    project = _project(client, admin, "Atlas", client_id=acme)

    inquiry = client.post(
        "/inquiries",
        json={"full_name": "Lead", "email": "Lead@Corp.io", "message": "Quote please", "project_id": project["id"]},
    )
    assert inquiry.status_code == 201
    assert inquiry.json()["status"] == "NEW"
    assert inquiry.json()["email"] == "lead@corp.io"

    event = client.post(
        f"/admin/projects/{project['id']}/timeline",
        json={"event_type": "PLANNING", "title": "Scope agreed"},
        headers=_as(admin),
    )
    assert event.status_code == 201
    timeline = client.get(f"/projects/{project['id']}/timeline", headers=_as(acme)).json()
    assert [e["title"] for e in timeline] == ["Scope agreed"]
    assert timeline[0]["actor"]["id"] == admin

    feed = client.get("/notifications", headers=_as(acme)).json()
    assert [n["type"] for n in feed["notifications"]] == ["PROJECT_NOTE"]
    assert feed["notifications"][0]["title"] == "Atlas: Scope agreed"


def test_customer_submits_own_project(client, engine):
    acme = _seed(engine, "Acme", Role.CUSTOMER)
    other = _seed(engine, "Other", Role.CUSTOMER)
    resp = client.post(
        "/projects",
        json={
            "name": "Storefront",
            "summary": "New shop",
            "status": "DEPLOYED",
            "progress_percentage": 90,
            "highlighted": True,
            "client_id": other,
        },
        headers=_as(acme),
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["client_id"] == acme
    assert body["status"] == "PLANNING"
    assert body["progress_percentage"] == 5
    assert body["highlighted"] is False
    assert body["start_date"] is not None

    mine = client.get("/projects", headers=_as(acme)).json()
    assert [p["name"] for p in mine] == ["Storefront"]
    assert client.get("/projects", headers=_as(other)).json() == []


def test_developer_cannot_create_projects(client, engine):
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    resp = client.post("/projects", json={"name": "Side quest"}, headers=_as(dev))
    assert resp.status_code == 403


def test_project_update_ignores_nulls_for_required_fields(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    project = _project(client, admin, "Atlas", summary="Portal", target_date="2026-12-01")

    resp = client.patch(
        f"/projects/{project['id']}",
        json={"name": None, "status": None, "highlighted": None, "target_date": None},
        headers=_as(admin),
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["name"] == "Atlas"
    assert body["status"] == "PLANNING"
    assert body["summary"] == "Portal"
    assert body["target_date"] is None


def test_project_completion_reaches_client_and_team(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    acme = _seed(engine, "Acme", Role.CUSTOMER)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    project = _project(client, admin, "Atlas", client_id=acme)
    _assign(client, admin, project["id"], dev, "DEVELOPER")

    client.patch(f"/projects/{project['id']}", json={"progress_percentage": 100}, headers=_as(admin))
    client.patch(f"/projects/{project['id']}", json={"status": "DEPLOYED"}, headers=_as(admin))

    customer_feed = client.get("/notifications", headers=_as(acme)).json()
    assert [n["type"] for n in customer_feed["notifications"]] == ["PROJECT_COMPLETED"]
    dev_types = [n["type"] for n in client.get("/notifications", headers=_as(dev)).json()["notifications"]]
    assert dev_types == ["PROJECT_COMPLETED", "PROJECT_ASSIGNMENT"]


def test_project_lookup_by_name(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    acme = _seed(engine, "Acme", Role.CUSTOMER)
    project = _project(client, admin, "Atlas Portal")

    found = client.get("/admin/projects/lookup", params={"name": "atlas portal"}, headers=_as(admin))
    assert found.status_code == 200
    assert found.json()["id"] == project["id"]
    missing = client.get("/admin/projects/lookup", params={"name": "Nowhere"}, headers=_as(admin))
    assert missing.status_code == 404
    assert missing.json()["reason"] == "project.not_found"
    assert client.get("/admin/projects/lookup", params={"name": "Atlas"}, headers=_as(acme)).status_code == 403


def test_assignments_listed_by_role(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    sub = _seed(engine, "Sam Sub", Role.SUB_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    project = _project(client, admin, "Atlas")
    _assign(client, admin, project["id"], sub, "SUB_ADMIN")
    _assign(client, admin, project["id"], dev, "DEVELOPER")

    resp = client.get("/super-admin/project-assignments", params={"role": "DEVELOPER"}, headers=_as(admin))
    assert resp.status_code == 200
    assert [a["member_id"] for a in resp.json()] == [dev]
    denied = client.get("/super-admin/project-assignments", params={"role": "DEVELOPER"}, headers=_as(sub))
    assert denied.status_code == 403


def test_admin_board_status_filter(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    project = _project(client, admin, "Atlas")
    url = f"/admin/projects/{project['id']}/tasks"
    client.post(url, json={"title": "Kickoff"}, headers=_as(admin))
    blocked = client.post(url, json={"title": "Vendor access", "status": "BLOCKED"}, headers=_as(admin)).json()

    board = client.get(url, params={"status": "BLOCKED"}, headers=_as(admin)).json()
    assert [t["id"] for t in board["blocked"]] == [blocked["id"]]
    assert board["todo"] == []
    assert len(client.get(url, headers=_as(admin)).json()["todo"]) == 1


def test_unknown_stored_task_status_is_a_conflict(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    project = _project(client, admin, "Atlas")
    with Session(engine) as session:
        session.execute(
            text(
                "INSERT INTO project_tasks (project_id, title, status, priority, created_at, updated_at) "
                "VALUES (:project_id, 'Legacy', 'ARCHIVED', 'MEDIUM', '2026-01-01 00:00:00', '2026-01-01 00:00:00')"
            ),
            {"project_id": project["id"]},
        )
        session.commit()

    resp = client.get(f"/admin/projects/{project['id']}/tasks", headers=_as(admin))
    assert resp.status_code == 409
    assert resp.json()["reason"] == "task.status.unknown"


def test_new_inquiry_notifies_super_admins(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    sub = _seed(engine, "Sam Sub", Role.SUB_ADMIN)
    resp = client.post(
        "/inquiries",
        json={"full_name": "Lead", "email": "lead@corp.io", "message": "Need a mobile app"},
    )
    assert resp.status_code == 201

    feed = client.get("/notifications", headers=_as(admin)).json()
    assert [(n["type"], n["title"]) for n in feed["notifications"]] == [("INQUIRY_SUBMITTED", "New inquiry from Lead")]
    assert feed["notifications"][0]["message"] == "Need a mobile app"
    assert client.get("/notifications", headers=_as(sub)).json()["unread_count"] == 0


def test_admin_inquiry_workflow(client, engine):
    admin = _seed(engine, "Root", Role.SUPER_ADMIN)
    sub = _seed(engine, "Sam Sub", Role.SUB_ADMIN)
    dev = _seed(engine, "Dev", Role.DEVELOPER)
    acme = _seed(engine, "Acme", Role.CUSTOMER)
    first = client.post("/inquiries", json={"full_name": "First", "email": "a@corp.io", "message": "Hi"}).json()
    second = client.post("/inquiries", json={"full_name": "Second", "email": "b@corp.io", "message": "Hello"}).json()

    listed = client.get("/admin/inquiries", headers=_as(sub))
    assert listed.status_code == 200
    assert [i["id"] for i in listed.json()] == [second["id"], first["id"]]
    assert client.get("/admin/inquiries", headers=_as(dev)).status_code == 403
    assert client.get("/admin/inquiries", headers=_as(acme)).status_code == 403

    updated = client.patch(
        f"/admin/inquiries/{first['id']}",
        json={"status": "QUOTED", "assigned_to": "  Sam Sub "},
        headers=_as(sub),
    )
    assert updated.status_code == 200, updated.text
    assert updated.json()["status"] == "QUOTED"
    assert updated.json()["assigned_to"] == "Sam Sub"

    cleared = client.patch(f"/admin/inquiries/{first['id']}", json={"status": "WON"}, headers=_as(admin))
    assert cleared.json()["assigned_to"] is None

    missing = client.patch("/admin/inquiries/9999", json={"status": "LOST"}, headers=_as(admin))
    assert missing.status_code == 404
    assert missing.json()["reason"] == "inquiry.not_found"
    assert client.patch(f"/admin/inquiries/{first['id']}", json={"status": "LOST"}, headers=_as(dev)).status_code == 403
