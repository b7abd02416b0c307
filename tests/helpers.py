from __future__ import annotations


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def login_system(client, name: str = "admin1", password: str = "Secret123!") -> str:
    resp = client.post("/api/auth/login", json={"username": name, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def login_course(client, course_id: int, username: str = "staff1", password: str = "Password1!") -> str:
    resp = client.post(
        f"/api/golf-course/{course_id}/auth/login",
        json={"username": username, "password": password},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]
