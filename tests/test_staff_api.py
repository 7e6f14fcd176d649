"""
Endpoint tests for the staff roster.
"""

from staff_manager.acl import ROLE_CRUSHER_ADMIN, ROLE_MANAGER, ROLE_MLT_ADMIN, ROLE_PETROLEUM_ADMIN


class TestStaffList:
    def test_empty_list_says_so(self, login):
        body = login(ROLE_MANAGER).get("/staff/").get_json()
        assert body["staff"] == []
        assert body["message"] == "no records"

    def test_filters(self, login, add_staff):
        add_staff("Asha", "petroleum")
        add_staff("Bala", "crusher")
        add_staff("Chotu", "driver", roster="transport")
        client = login(ROLE_MANAGER)

        names = lambda url: [s["name"] for s in client.get(url).get_json()["staff"]]
        assert names("/staff/") == ["Asha", "Bala"]
        assert names("/staff/?category=crusher") == ["Bala"]
        assert names("/staff/?roster=transport") == ["Chotu"]

    def test_bad_category(self, login):
        r = login(ROLE_MANAGER).get("/staff/?roster=staff&category=driver")
        assert r.status_code == 400
        assert r.get_json()["error"] == "bad_category"

    def test_inactive_hidden_unless_asked(self, login, add_staff):
        add_staff("Old", "office", active=False)
        client = login(ROLE_MANAGER)
        assert client.get("/staff/").get_json()["staff"] == []
        assert [s["name"] for s in client.get("/staff/?include_inactive=1").get_json()["staff"]] == ["Old"]

    def test_admin_sees_own_category_only(self, login, add_staff):
        add_staff("Asha", "petroleum")
        add_staff("Bala", "crusher")
        body = login(ROLE_CRUSHER_ADMIN).get("/staff/").get_json()
        assert [s["name"] for s in body["staff"]] == ["Bala"]

    def test_mlt_admin_sees_transport(self, login, add_staff):
        add_staff("Asha", "petroleum")
        add_staff("Chotu", "khalasi", roster="transport")
        body = login(ROLE_MLT_ADMIN).get("/staff/").get_json()
        assert [s["name"] for s in body["staff"]] == ["Chotu"]


class TestStaffWrite:
    def test_create(self, login):
        r = login(ROLE_MANAGER).post("/staff/", json={
            "name": "  Dinesh ", "category": "office", "shift_rate": "450", "phone": "98765",
        })
        assert r.status_code == 201
        s = r.get_json()["staff"]
        assert s["name"] == "Dinesh"
        assert s["roster"] == "staff"
        assert s["category"] == "office"
        assert s["shift_rate"].startswith("450")
        assert s["is_active"] is True

    def test_create_transport_infers_roster(self, login):
        r = login(ROLE_MANAGER).post("/staff/", json={"name": "Chotu", "category": "driver"})
        assert r.status_code == 201
        assert r.get_json()["staff"]["roster"] == "transport"

    def test_create_validation(self, login):
        client = login(ROLE_MANAGER)
        assert client.post("/staff/", json={"category": "office"}).get_json()["error"] == "no_name"
        assert client.post("/staff/", json={"name": "X", "category": "chef"}).get_json()["error"] == "bad_category"
        r = client.post("/staff/", json={"name": "X", "category": "office", "shift_rate": "-5"})
        assert r.status_code == 400
        assert r.get_json()["error"] == "bad_shift_rate"
        r = client.post("/staff/", json={"name": "X", "category": "office", "shift_rate": "333.335"})
        assert r.status_code == 400
        assert r.get_json()["error"] == "bad_shift_rate"
        assert client.get("/staff/?category=office").get_json()["staff"] == []

    def test_admin_cannot_create_outside_category(self, login):
        r = login(ROLE_PETROLEUM_ADMIN).post("/staff/", json={"name": "X", "category": "crusher"})
        assert r.status_code == 403

    def test_update(self, login, add_staff):
        sid = add_staff("Asha", "petroleum")
        client = login(ROLE_MANAGER)
        r = client.post(f"/staff/{sid}/update", json={"shift_rate": "650", "designation": "Pump operator"})
        s = r.get_json()["staff"]
        assert s["shift_rate"].startswith("650")
        assert s["designation"] == "Pump operator"
        assert s["category"] == "petroleum"

    def test_admin_cannot_move_staff_out_of_scope(self, login, add_staff):
        sid = add_staff("Asha", "petroleum")
        client = login(ROLE_PETROLEUM_ADMIN)
        r = client.post(f"/staff/{sid}/update", json={"category": "crusher"})
        assert r.status_code == 403
        assert client.get(f"/staff/{sid}").get_json()["staff"]["category"] == "petroleum"

    def test_deactivate_needs_confirm(self, login, add_staff):
        sid = add_staff("Asha", "petroleum")
        client = login(ROLE_MANAGER)
        r = client.post(f"/staff/{sid}/deactivate", json={})
        assert r.status_code == 400
        assert r.get_json()["error"] == "confirm_required"

        r = client.post(f"/staff/{sid}/deactivate", json={"confirm": True})
        assert r.get_json()["staff"]["is_active"] is False
        r = client.post(f"/staff/{sid}/activate")
        assert r.get_json()["staff"]["is_active"] is True

    def test_not_found(self, login):
        r = login(ROLE_MANAGER).get("/staff/999")
        assert r.status_code == 404
        assert r.get_json()["error"] == "not_found"
