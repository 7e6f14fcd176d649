"""
Endpoint tests for login/logout and user management.
"""

from staff_manager.acl import ROLE_CRUSHER_ADMIN, ROLE_MANAGER, ROLE_PETROLEUM_ADMIN

from conftest import PASSWORD


class TestLogin:
    def test_login_and_me(self, app, make_user):
        make_user("anita", ROLE_PETROLEUM_ADMIN)
        client = app.test_client()
        r = client.post("/auth/login", json={"username": "anita", "password": PASSWORD})
        assert r.status_code == 200
        assert r.get_json()["user"]["role"] == ROLE_PETROLEUM_ADMIN

        me = client.get("/auth/me").get_json()
        assert me["ok"] is True
        assert me["user"]["username"] == "anita"

    def test_wrong_password(self, app, make_user):
        make_user("anita")
        r = app.test_client().post("/auth/login", json={"username": "anita", "password": "nope"})
        assert r.status_code == 401
        assert r.get_json() == {"ok": False, "error": "bad_credentials", "message": "wrong username or password"}

    def test_inactive_user_cannot_login(self, app, make_user):
        make_user("gone", active=False)
        r = app.test_client().post("/auth/login", json={"username": "gone", "password": PASSWORD})
        assert r.status_code == 403
        assert r.get_json()["error"] == "inactive_user"

    def test_login_required_is_json(self, app):
        r = app.test_client().get("/staff/")
        assert r.status_code == 401
        assert r.get_json()["error"] == "unauthorized"

    def test_logout(self, login):
        client = login(ROLE_MANAGER)
        assert client.post("/auth/logout").status_code == 200
        assert client.get("/auth/me").status_code == 401


class TestUsers:
    def test_manager_creates_user(self, login):
        client = login(ROLE_MANAGER)
        r = client.post("/auth/users", json={
            "username": "ravi", "password": "pw12345", "role": ROLE_CRUSHER_ADMIN, "category": "crusher",
        })
        assert r.status_code == 201
        assert r.get_json()["user"]["role"] == ROLE_CRUSHER_ADMIN

        names = [u["username"] for u in client.get("/auth/users").get_json()["users"]]
        assert "ravi" in names

    def test_duplicate_username(self, login):
        client = login(ROLE_MANAGER)
        body = {"username": "ravi", "password": "pw12345", "role": ROLE_MANAGER}
        assert client.post("/auth/users", json=body).status_code == 201
        r = client.post("/auth/users", json=body)
        assert r.status_code == 409
        assert r.get_json()["error"] == "username_taken"

    def test_bad_role(self, login):
        r = login(ROLE_MANAGER).post("/auth/users", json={"username": "x", "password": "y", "role": "boss"})
        assert r.status_code == 400
        assert r.get_json()["error"] == "bad_role"

    def test_admin_cannot_manage_users(self, login):
        client = login(ROLE_PETROLEUM_ADMIN)
        assert client.get("/auth/users").status_code == 403
        assert client.post("/auth/users", json={"username": "x", "password": "y"}).status_code == 403

    def test_disable_user(self, app, login, make_user):
        uid = make_user("temp", ROLE_CRUSHER_ADMIN)
        client = login(ROLE_MANAGER)
        r = client.post(f"/auth/users/{uid}/update", json={"is_active": False})
        assert r.get_json()["user"]["is_active"] is False
        r = app.test_client().post("/auth/login", json={"username": "temp", "password": PASSWORD})
        assert r.status_code == 403
