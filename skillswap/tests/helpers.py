from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast
from uuid import uuid4

from fastapi.testclient import TestClient
from sqlmodel import Session

import skillswap.core.db as db_module
from skillswap.models.user import User, UserRole

API = "/api/v1"
PASSWORD = "StrongPass123$"


@dataclass(frozen=True)
class Account:
    id: int
    email: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def register(client: TestClient, name: str = "user", *, is_public: bool = True) -> Account:
    email = f"{name.lower()}-{uuid4().hex[:8]}@example.com"
    response = client.post(
        f"{API}/auth/signup",
        json={"email": email, "password": PASSWORD, "name": name},
    )
    assert response.status_code == 200, response.text
    token = cast(str, response.json()["access_token"])

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200, me.text
    account = Account(id=int(me.json()["id"]), email=email, token=token)
    if not is_public:
        set_public(client, account, False)
    return account


def set_public(client: TestClient, account: Account, is_public: bool) -> None:
    response = client.put(
        f"{API}/profile/update",
        headers=account.headers,
        json={"is_public": is_public},
    )
    assert response.status_code == 200, response.text


def set_role(account: Account, role: UserRole) -> None:
    with Session(db_module.engine) as session:
        user = session.get(User, account.id)
        assert user is not None
        user.role = role
        session.add(user)
        session.commit()


def add_skill(client: TestClient, account: Account, name: str, skill_type: str) -> int:
    response = client.post(
        f"{API}/skills/add",
        headers=account.headers,
        json={"name": name, "type": skill_type},
    )
    assert response.status_code == 201, response.text
    return int(response.json()["id"])


def send_request(
    client: TestClient,
    sender: Account,
    receiver: Account,
    message: str | None = None,
) -> Any:
    return client.post(
        f"{API}/requests/create",
        headers=sender.headers,
        json={"receiver_id": receiver.id, "message": message},
    )


def respond(client: TestClient, receiver: Account, request_id: int, status: str) -> Any:
    return client.put(
        f"{API}/requests/{request_id}/respond",
        headers=receiver.headers,
        json={"status": status},
    )


def accepted_swap(client: TestClient, sender: Account, receiver: Account) -> int:
    created = send_request(client, sender, receiver)
    assert created.status_code == 201, created.text
    request_id = int(created.json()["id"])
    accepted = respond(client, receiver, request_id, "ACCEPTED")
    assert accepted.status_code == 200, accepted.text
    return request_id


def rate(
    client: TestClient,
    rater: Account,
    rated: Account,
    swap_request_id: int,
    value: int,
    *,
    is_public: bool = True,
) -> Any:
    return client.post(
        f"{API}/ratings/submit",
        headers=rater.headers,
        json={
            "swap_request_id": swap_request_id,
            "rated_user_id": rated.id,
            "rating": value,
            "is_public": is_public,
        },
    )


def search_ids(client: TestClient, viewer: Account, **params: Any) -> set[int]:
    response = client.get(
        f"{API}/search/users",
        headers=viewer.headers,
        params={"limit": 100, **params},
    )
    assert response.status_code == 200, response.text
    return {int(user["id"]) for user in response.json()["users"]}
