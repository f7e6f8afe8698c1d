from datetime import datetime, timedelta, timezone

from app.models.user import UserRole
from app.utils.security import session_key
from tests.conftest import PASSWORD, auth_header


def test_signup_creates_citizen(client, signup):
    user, headers = signup(email="Asha@Example.com", name="Asha")

    assert user["email"] == "asha@example.com"
    assert user["role"] == "citizen"
    assert user["points"] == 0
    assert user["badge"] == "Guardian"
    assert user["badge_emoji"] == "🌱"
    assert "submit_reports" in user["permissions"]
    assert "password_hash" not in user

    me = client.get("/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]


def test_signup_duplicate_email(client, signup):
    signup(email="dup@example.com")
    resp = client.post("/auth/signup", json={"email": "DUP@example.com", "password": PASSWORD, "name": "Again"})

    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "email-already-in-use"


def test_signup_validation(client):
    short = client.post("/auth/signup", json={"email": "a@example.com", "password": "123", "name": "A"})
    assert short.status_code == 422

    bad_email = client.post("/auth/signup", json={"email": "not-an-email", "password": PASSWORD, "name": "A"})
    assert bad_email.status_code == 422


def test_login_errors(client, signup):
    signup(email="login@example.com")

    unknown = client.post("/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert unknown.status_code == 401
    assert unknown.json()["detail"]["code"] == "user-not-found"
    assert unknown.json()["detail"]["message"] == "No account found with this email address."

    wrong = client.post("/auth/login", json={"email": "login@example.com", "password": "wrong-one"})
    assert wrong.status_code == 401
    assert wrong.json()["detail"]["code"] == "wrong-password"

    ok = client.post("/auth/login", json={"email": "login@example.com", "password": PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["token"]


def test_portals_restrict_roles(client, signup, staff):
    signup(email="citizen@example.com")
    staff(UserRole.NGO, email="ngo@example.com")
    staff(UserRole.ADMIN, email="admin@example.com")

    denied = client.post("/auth/admin-login", json={"email": "citizen@example.com", "password": PASSWORD})
    assert denied.status_code == 403
    assert denied.json()["detail"]["code"] == "access-denied"

    ngo_at_gov = client.post("/auth/government-login", json={"email": "ngo@example.com", "password": PASSWORD})
    assert ngo_at_gov.status_code == 403

    assert client.post("/auth/ngo-login", json={"email": "ngo@example.com", "password": PASSWORD}).status_code == 200
    assert client.post("/auth/admin-login", json={"email": "admin@example.com", "password": PASSWORD}).status_code == 200


def test_staff_keep_role_badge(staff):
    user, _ = staff(UserRole.GOVERNMENT)
    assert user["badge"] == "Forestry Official"
    assert "approve_reports" in user["permissions"]


def test_logout_ends_session(client, signup):
    _, headers = signup()

    assert client.post("/auth/logout", headers=headers).status_code == 200
    resp = client.get("/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "invalid-session"


def test_missing_token(client):
    assert client.get("/auth/me").status_code == 401


def test_expired_session(client, signup, db):
    _, headers = signup()
    token = headers["Authorization"].split(" ", 1)[1]
    db.collection("sessions").document(session_key(token)).update({
        "expires_at": datetime.now(timezone.utc) - timedelta(minutes=1),
    })

    resp = client.get("/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "session-expired"
    assert not db.collection("sessions").document(session_key(token)).get().exists


def test_disabled_user_cannot_login(client, signup, db):
    user, _ = signup(email="off@example.com")
    db.collection("users").document(user["id"]).update({"is_active": False})

    resp = client.post("/auth/login", json={"email": "off@example.com", "password": PASSWORD})
    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "user-disabled"


def test_session_token_is_not_stored(signup, db):
    _, headers = signup()
    token = headers["Authorization"].split(" ", 1)[1]

    assert not db.collection("sessions").document(token).get().exists
    assert db.collection("sessions").document(session_key(token)).get().exists
