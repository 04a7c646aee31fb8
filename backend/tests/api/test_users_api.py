"""User API — registration and protected CRUD over HTTP.

Tests:
    - POST /auth/register → 201, password never in the response
    - Duplicate email → 409 with the offending field; invalid email → 400
    - Protected CRUD round trip (create, read, update, delete → 404)
    - Server-managed fields cannot be changed; non-integer ids → 400
"""

NEW_USER = {"email": "grace@example.com", "name": "Grace Hopper", "password": "cobol"}


async def test_register_returns_201_without_password(client):
    res = await client.post("/auth/register", json=NEW_USER)
    assert res.status_code == 201
    body = res.json()
    assert body["email"] == "grace@example.com"
    assert body["name"] == "Grace Hopper"
    assert "password" not in body
    assert isinstance(body["id"], int)


async def test_register_duplicate_email_returns_409(client):
    await client.post("/auth/register", json=NEW_USER)
    res = await client.post("/auth/register", json={**NEW_USER, "name": "Other"})
    assert res.status_code == 409
    errors = res.json()["errors"]
    assert [e["path"] for e in errors] == ["email"]
    assert errors[0]["value"] == "grace@example.com"


async def test_register_invalid_email_returns_400(client):
    res = await client.post("/auth/register", json={**NEW_USER, "email": "nope"})
    assert res.status_code == 400
    assert res.json()["errors"][0]["path"] == "email"


async def test_register_missing_fields_returns_400(client):
    res = await client.post("/auth/register", json={"email": "grace@example.com"})
    assert res.status_code == 400
    paths = {e["path"] for e in res.json()["errors"]}
    assert paths == {"name", "password"}


async def test_register_non_object_body_returns_400(client):
    res = await client.post("/auth/register", json=["not", "an", "object"])
    assert res.status_code == 400


async def test_list_users_never_includes_passwords(client, auth_headers):
    res = await client.get("/user", headers=auth_headers)
    assert res.status_code == 200
    users = res.json()
    assert [u["email"] for u in users] == ["ada@example.com"]
    assert all("password" not in u for u in users)


async def test_create_then_get_round_trip(client, auth_headers):
    created = await client.post("/user", json=NEW_USER, headers=auth_headers)
    assert created.status_code == 201
    user_id = created.json()["id"]

    res = await client.get(f"/user/{user_id}", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["email"] == NEW_USER["email"]
    assert "password" not in res.json()


async def test_get_unknown_user_returns_404(client, auth_headers):
    res = await client.get("/user/9999", headers=auth_headers)
    assert res.status_code == 404
    assert res.json() == {"message": "not found"}


async def test_non_integer_id_returns_400(client, auth_headers):
    res = await client.get("/user/abc", headers=auth_headers)
    assert res.status_code == 400


async def test_update_merges_attributes(client, auth_headers, seed_user):
    res = await client.put(
        f"/user/{seed_user.id}", json={"name": "Countess"}, headers=auth_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Countess"
    assert body["email"] == seed_user.email
    assert "password" not in body


async def test_update_keeps_login_working_when_password_untouched(client, auth_headers, seed_user):
    await client.put(f"/user/{seed_user.id}", json={"name": "Countess"}, headers=auth_headers)
    res = await client.post(
        "/auth/login",
        json={"email": seed_user.email, "password": "correct horse battery staple"},
    )
    assert res.status_code == 200


async def test_update_cannot_change_id(client, auth_headers, seed_user):
    res = await client.put(
        f"/user/{seed_user.id}", json={"id": 42}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert res.json()["errors"][0]["path"] == "id"


async def test_update_echoing_id_is_allowed(client, auth_headers, seed_user):
    res = await client.put(
        f"/user/{seed_user.id}",
        json={"id": seed_user.id, "name": "Ada"},
        headers=auth_headers,
    )
    assert res.status_code == 200


async def test_update_unknown_user_returns_404(client, auth_headers):
    res = await client.put("/user/9999", json={"name": "x"}, headers=auth_headers)
    assert res.status_code == 404


async def test_delete_returns_204_then_404(client, auth_headers):
    created = await client.post("/user", json=NEW_USER, headers=auth_headers)
    user_id = created.json()["id"]

    res = await client.delete(f"/user/{user_id}", headers=auth_headers)
    assert res.status_code == 204
    assert res.content == b""

    res = await client.get(f"/user/{user_id}", headers=auth_headers)
    assert res.status_code == 404
