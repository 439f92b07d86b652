from __future__ import annotations

from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlmodel import Session

import skillswap.core.db as db_module
from skillswap.models.user import User, UserRole
from skillswap.tests.helpers import (
    API,
    PASSWORD,
    Account,
    add_skill,
    register,
    send_request,
    set_role,
)


def _admin(client: TestClient, role: UserRole = UserRole.ADMIN) -> Account:
    account = register(client, "Admin")
    set_role(account, role)
    return account


def _login_status(client: TestClient, account: Account) -> int:
    response = client.post(
        f"{API}/auth/login",
        json={"email": account.email, "password": PASSWORD},
    )
    return response.status_code


def test_admin_routes_require_admin_role(client: TestClient) -> None:
    user = register(client, "Plain")
    assert client.get(f"{API}/admin/users", headers=user.headers).status_code == 403
    assert client.get(f"{API}/admin/reports", headers=user.headers).status_code == 403

    admin = _admin(client)
    assert client.get(f"{API}/admin/users", headers=admin.headers).status_code == 200
    # role changes and the audit log are reserved for super admins
    assert client.get(f"{API}/admin/logs", headers=admin.headers).status_code == 403
    response = client.put(
        f"{API}/admin/users/{user.id}/role",
        headers=admin.headers,
        json={"role": "ADMIN"},
    )
    assert response.status_code == 403


def test_ban_blocks_login_and_api_until_unbanned(client: TestClient) -> None:
    admin = _admin(client)
    target = register(client, "Troublemaker")

    self_ban = client.put(
        f"{API}/admin/users/{admin.id}/ban",
        headers=admin.headers,
        json={"reason": "oops"},
    )
    assert self_ban.status_code == 400

    banned = client.put(
        f"{API}/admin/users/{target.id}/ban",
        headers=admin.headers,
        json={"reason": "spam", "duration": "7d"},
    )
    assert banned.status_code == 200, banned.text
    body = banned.json()
    assert body["is_active"] is False
    assert body["banned_reason"] == "spam"
    assert body["banned_until"] is not None

    assert _login_status(client, target) == 403
    assert client.get(f"{API}/profile", headers=target.headers).status_code == 403

    banned_list = client.get(
        f"{API}/admin/users",
        headers=admin.headers,
        params={"status": "banned"},
    ).json()
    assert target.id in {user["id"] for user in banned_list["users"]}

    unbanned = client.put(f"{API}/admin/users/{target.id}/unban", headers=admin.headers)
    assert unbanned.status_code == 200, unbanned.text
    assert _login_status(client, target) == 200
    assert client.get(f"{API}/profile", headers=target.headers).status_code == 200


def test_expired_temporary_ban_is_lifted(client: TestClient) -> None:
    admin = _admin(client)
    target = register(client, "Returning")
    client.put(
        f"{API}/admin/users/{target.id}/ban",
        headers=admin.headers,
        json={"reason": "cool off", "duration": "7d"},
    )
    with Session(db_module.engine) as session:
        user = session.get(User, target.id)
        assert user is not None
        user.banned_until = datetime.utcnow() - timedelta(minutes=1)
        session.add(user)
        session.commit()

    assert _login_status(client, target) == 200


def test_only_super_admin_can_ban_admins_and_change_roles(client: TestClient) -> None:
    admin = _admin(client)
    other_admin = _admin(client)
    super_admin = _admin(client, UserRole.SUPER_ADMIN)
    user = register(client, "Promotable")

    response = client.put(
        f"{API}/admin/users/{other_admin.id}/ban",
        headers=admin.headers,
        json={"reason": "rogue"},
    )
    assert response.status_code == 403

    promoted = client.put(
        f"{API}/admin/users/{user.id}/role",
        headers=super_admin.headers,
        json={"role": "ADMIN"},
    )
    assert promoted.status_code == 200, promoted.text
    assert promoted.json()["role"] == "ADMIN"
    assert client.get(f"{API}/admin/users", headers=user.headers).status_code == 200

    logs = client.get(
        f"{API}/admin/logs",
        headers=super_admin.headers,
        params={"action": "role"},
    )
    assert logs.status_code == 200, logs.text
    entries = logs.json()["logs"]
    assert entries[0]["action"] == "UPDATE_USER_ROLE"
    assert entries[0]["target_id"] == user.id


def test_user_detail(client: TestClient) -> None:
    admin = _admin(client)
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    add_skill(client, alice, "Pottery", "OFFERED")
    assert send_request(client, alice, bob).status_code == 201

    detail = client.get(f"{API}/admin/users/{alice.id}", headers=admin.headers)
    assert detail.status_code == 200, detail.text
    body = detail.json()
    assert [skill["name"] for skill in body["skills"]] == ["Pottery"]
    assert len(body["sent_requests"]) == 1
    assert body["received_requests"] == []

    assert client.get(f"{API}/admin/users/999999", headers=admin.headers).status_code == 404


def test_reports_lifecycle(client: TestClient) -> None:
    admin = _admin(client)
    reporter = register(client, "Reporter")
    offender = register(client, "Offender")
    skill_id = add_skill(client, offender, "Totally legit", "OFFERED")

    user_report = client.post(
        f"{API}/reports",
        headers=reporter.headers,
        json={"type": "USER", "reported_user_id": offender.id, "reason": "rude"},
    )
    assert user_report.status_code == 201, user_report.text
    assert user_report.json()["status"] == "PENDING"

    skill_report = client.post(
        f"{API}/reports",
        headers=reporter.headers,
        json={"type": "SKILL", "reported_skill_id": skill_id, "reason": "scam"},
    )
    assert skill_report.status_code == 201, skill_report.text
    assert skill_report.json()["reported_user_id"] == offender.id

    self_report = client.post(
        f"{API}/reports",
        headers=reporter.headers,
        json={"type": "USER", "reported_user_id": reporter.id, "reason": "test"},
    )
    assert self_report.status_code == 400

    missing = client.post(
        f"{API}/reports",
        headers=reporter.headers,
        json={"type": "SKILL", "reported_skill_id": 999999, "reason": "gone"},
    )
    assert missing.status_code == 404

    mismatched = client.post(
        f"{API}/reports",
        headers=reporter.headers,
        json={"type": "SKILL", "reported_user_id": offender.id, "reason": "x"},
    )
    assert mismatched.status_code == 422

    listing = client.get(
        f"{API}/admin/reports",
        headers=admin.headers,
        params={"type": "SKILL", "status": "PENDING"},
    )
    assert listing.status_code == 200, listing.text
    assert skill_report.json()["id"] in {item["id"] for item in listing.json()["reports"]}

    reviewed = client.put(
        f"{API}/admin/reports/{user_report.json()['id']}",
        headers=admin.headers,
        json={"status": "RESOLVED", "resolution": "warned"},
    )
    assert reviewed.status_code == 200, reviewed.text
    assert reviewed.json()["reviewed_by"] == admin.id
    assert reviewed.json()["reviewed_at"] is not None

    assert client.put(
        f"{API}/admin/reports/999999",
        headers=admin.headers,
        json={"status": "DISMISSED"},
    ).status_code == 404


def test_skill_moderation(client: TestClient) -> None:
    admin = _admin(client)
    owner = register(client, "Owner")
    reporter = register(client, "Reporter")
    skill_id = add_skill(client, owner, "Questionable", "OFFERED")
    report = client.post(
        f"{API}/reports",
        headers=reporter.headers,
        json={"type": "SKILL", "reported_skill_id": skill_id, "reason": "spam"},
    )
    assert report.status_code == 201

    flagged = client.put(
        f"{API}/admin/content/skills/{skill_id}/flag",
        headers=admin.headers,
        json={"reason": "misleading"},
    )
    assert flagged.status_code == 200, flagged.text
    assert flagged.json()["is_flagged"] is True
    assert flagged.json()["is_approved"] is False

    queue = client.get(f"{API}/admin/content/flagged", headers=admin.headers).json()
    assert skill_id in {skill["id"] for skill in queue["skills"]}

    approved = client.put(
        f"{API}/admin/content/skills/{skill_id}/approve",
        headers=admin.headers,
    )
    assert approved.json()["is_flagged"] is False
    assert approved.json()["flag_reason"] is None

    deleted = client.delete(f"{API}/admin/content/skills/{skill_id}", headers=admin.headers)
    assert deleted.status_code == 200, deleted.text
    assert client.get(f"{API}/skills", headers=owner.headers).json() == []

    reports = client.get(f"{API}/admin/reports", headers=admin.headers).json()["reports"]
    kept = next(item for item in reports if item["id"] == report.json()["id"])
    assert kept["reported_skill_id"] is None

    assert client.delete(
        f"{API}/admin/content/skills/{skill_id}",
        headers=admin.headers,
    ).status_code == 404


def test_swap_request_monitoring(client: TestClient) -> None:
    admin = _admin(client)
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    request_id = int(send_request(client, alice, bob).json()["id"])

    response = client.get(
        f"{API}/admin/swap-requests",
        headers=admin.headers,
        params={"status": "PENDING"},
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert request_id in {item["id"] for item in body["requests"]}
    assert all(item["status"] == "PENDING" for item in body["requests"])
