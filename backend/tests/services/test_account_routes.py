"""Account Routes — verifies user/shop registration, login, cookies and account lifecycle.

Invariants:
    - Register/login set an HttpOnly Authorization cookie and return the token
    - Duplicate email → 409 CONFLICT
    - Wrong password and unknown email → identical 401 bodies (minus timestamp)
    - Admin users receive an admin token at login
    - Deleting an account fixes the counters of every shop it subscribed to
"""

from sqlalchemy import select

from shopnear.core.domain_types import PrincipalKind
from shopnear.models.shop import Shop
from shopnear.services.subscription_ledger import SubscriptionLedger

PASSWORD = "secret-pass"

SHOP_BODY = {
    "name": "Fresh Mart",
    "owner_name": "Priya",
    "type": "grocery",
    "email": "fresh@example.com",
    "mobile": "9876543210",
    "password": PASSWORD,
    "address": "12 Mount Road, Chennai",
    "latitude": 13.0827,
    "longitude": 80.2707,
}


def _cookie(token: str) -> dict:
    return {"Cookie": f"Authorization={token}"}


def _without_timestamp(body: dict) -> dict:
    error = {k: v for k, v in body["error"].items() if k != "timestamp"}
    return {**body, "error": error}


# ─── Users ───────────────────────────────────────────────────────

async def test_register_user_sets_cookie_and_returns_token(client, codec):
    res = await client.post("/auth/register", json={
        "name": "Arun", "email": "arun@example.com", "password": PASSWORD,
    })

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "arun@example.com"
    assert "password" not in body["data"]["user"]
    claims = codec.verify(body["data"]["token"])
    assert claims.role == "user"
    assert claims.subject_id == body["data"]["user"]["id"]
    set_cookie = res.headers["set-cookie"]
    assert "Authorization=" in set_cookie
    assert "httponly" in set_cookie.lower()


async def test_register_duplicate_email_conflicts(client, make_user):
    await make_user(email="taken@example.com")

    res = await client.post("/auth/register", json={
        "name": "Arun", "email": "taken@example.com", "password": PASSWORD,
    })

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


async def test_register_invalid_payload_is_invalid_parameter(client):
    res = await client.post("/auth/register", json={
        "name": "Arun", "email": "not-an-email", "password": "x",
    })

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INVALID_PARAMETER"
    fields = {d["field"] for d in body["error"]["details"]}
    assert {"body.email", "body.password"} <= fields


async def test_login_and_me(client, make_user):
    user = await make_user(email="me@example.com")

    res = await client.post("/auth/login", json={"email": "me@example.com", "password": PASSWORD})
    assert res.status_code == 200
    token = res.json()["data"]["token"]
    assert res.json()["data"]["role"] == "user"

    res = await client.get("/auth/me", headers=_cookie(token))
    assert res.status_code == 200
    assert res.json()["data"]["id"] == user.id


async def test_login_failures_are_indistinguishable(client, make_user):
    await make_user(email="real@example.com")

    wrong = await client.post("/auth/login", json={"email": "real@example.com", "password": "bad-pass"})
    unknown = await client.post("/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})

    assert wrong.status_code == unknown.status_code == 401
    assert _without_timestamp(wrong.json()) == _without_timestamp(unknown.json())


async def test_admin_login_issues_admin_token(client, codec, make_user):
    await make_user(email="admin@example.com", is_admin=True)

    res = await client.post("/auth/login", json={"email": "admin@example.com", "password": PASSWORD})

    assert res.json()["data"]["role"] == "admin"
    assert codec.verify(res.json()["data"]["token"]).role == "admin"


async def test_me_without_cookie_unauthorized(client):
    res = await client.get("/auth/me")

    assert res.status_code == 401
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "unauthorized"
    assert body["error"]["code"] == "UNAUTHORIZED"


async def test_me_with_shop_token_unauthorized(client, auth, make_shop):
    shop = await make_shop()
    res = await client.get("/auth/me", headers=auth(shop.id, PrincipalKind.SHOP_OWNER))
    assert res.status_code == 401


async def test_logout_clears_cookie(client, auth, make_user):
    user = await make_user()

    res = await client.post("/auth/logout", headers=auth(user.id))

    assert res.status_code == 200
    set_cookie = res.headers["set-cookie"]
    assert set_cookie.startswith("Authorization=")
    assert "Max-Age=0" in set_cookie


async def test_change_password(client, auth, make_user):
    user = await make_user(email="pw@example.com")

    res = await client.post("/auth/change-password", headers=auth(user.id), json={
        "oldPassword": PASSWORD, "newPassword": "another-pass",
    })
    assert res.status_code == 200

    res = await client.post("/auth/login", json={"email": "pw@example.com", "password": "another-pass"})
    assert res.status_code == 200


async def test_change_password_wrong_old_password(client, auth, make_user):
    user = await make_user()
    res = await client.post("/auth/change-password", headers=auth(user.id), json={
        "old_password": "wrong-pass", "new_password": "another-pass",
    })
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "INVALID_CREDENTIALS"


async def test_delete_account_purges_subscriptions(client, manager, auth, make_shop, make_user):
    shop = await make_shop()
    leaving, staying = await make_user(), await make_user()
    ledger = SubscriptionLedger(manager)
    await ledger.subscribe(shop.id, leaving.id)
    await ledger.subscribe(shop.id, staying.id)

    res = await client.delete("/auth/delete-account", headers=auth(leaving.id))

    assert res.status_code == 200
    assert res.json()["data"]["subscriptions_removed"] == 1
    async with manager.session() as session:
        count = (await session.execute(
            select(Shop.subscriber_count).where(Shop.id == shop.id),
        )).scalar_one()
    assert count == 1

    res = await client.get("/auth/me", headers=auth(leaving.id))
    assert res.status_code == 401


# ─── Shops ───────────────────────────────────────────────────────

async def test_register_shop_and_profile(client, codec):
    res = await client.post("/shop/register", json=SHOP_BODY)

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["shop"]["is_open"] is False
    assert data["shop"]["subscriber_count"] == 0
    assert codec.verify(data["token"]).role == "shop_owner"

    res = await client.get("/shop/profile", headers=_cookie(data["token"]))
    assert res.status_code == 200
    assert res.json()["data"]["name"] == "Fresh Mart"


async def test_register_shop_duplicate_email_conflicts(client):
    await client.post("/shop/register", json=SHOP_BODY)
    res = await client.post("/shop/register", json=SHOP_BODY)

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


async def test_register_shop_rejects_blank_name(client):
    res = await client.post("/shop/register", json={**SHOP_BODY, "name": "   "})
    assert res.status_code == 400


async def test_shop_login(client, make_shop):
    await make_shop(email="owner@example.com")

    ok = await client.post("/shop/login", json={"email": "owner@example.com", "password": PASSWORD})
    bad = await client.post("/shop/login", json={"email": "owner@example.com", "password": "bad-pass"})

    assert ok.status_code == 200
    assert bad.status_code == 401


async def test_update_status(client, auth, make_shop):
    shop = await make_shop()
    headers = auth(shop.id, PrincipalKind.SHOP_OWNER)

    res = await client.patch("/shop/status", headers=headers, json={"is_open": True})
    assert res.status_code == 200
    assert res.json()["data"]["is_open"] is True

    res = await client.get("/shop/profile", headers=headers)
    assert res.json()["data"]["is_open"] is True


async def test_profile_with_user_token_unauthorized(client, auth, make_user):
    user = await make_user()
    res = await client.get("/shop/profile", headers=auth(user.id))
    assert res.status_code == 401


# ─── Password length (bcrypt counts bytes) ───────────────────────

async def test_register_multibyte_password_over_72_bytes_is_400(client):
    res = await client.post("/auth/register", json={
        "name": "Élodie", "email": "elodie@example.com", "password": "é" * 40,
    })

    assert res.status_code == 400
    body = res.json()
    assert body["error"]["code"] == "INVALID_PARAMETER"
    assert "body.password" in {d["field"] for d in body["error"]["details"]}


async def test_register_multibyte_password_within_72_bytes(client):
    res = await client.post("/auth/register", json={
        "name": "Élodie", "email": "elodie@example.com", "password": "é" * 36,
    })
    assert res.status_code == 201

    res = await client.post("/auth/login", json={
        "email": "elodie@example.com", "password": "é" * 36,
    })
    assert res.status_code == 200


async def test_register_shop_multibyte_password_over_72_bytes_is_400(client):
    res = await client.post("/shop/register", json={**SHOP_BODY, "password": "日本" * 13})
    assert res.status_code == 400


async def test_change_password_new_password_over_72_bytes_is_400(client, auth, make_user):
    user = await make_user()
    res = await client.post("/auth/change-password", headers=auth(user.id), json={
        "oldPassword": PASSWORD, "newPassword": "é" * 40,
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_PARAMETER"


async def test_login_password_over_72_bytes_is_400(client):
    res = await client.post("/auth/login", json={
        "email": "someone@example.com", "password": "é" * 40,
    })
    assert res.status_code == 400
