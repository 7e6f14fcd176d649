"""
Endpoint tests for the advance ledger.
"""

from datetime import date
from io import BytesIO

from openpyxl import load_workbook

from staff_manager.acl import ROLE_CRUSHER_ADMIN, ROLE_MANAGER


class TestAdvances:
    def test_add_and_list_month(self, login, add_staff):
        sid = add_staff("Asha", "petroleum")
        client = login(ROLE_MANAGER)
        r = client.post("/advances/", json={"staff_id": sid, "amount": "1500", "date": "2025-03-04", "notes": "rent"})
        assert r.status_code == 201
        adv = r.get_json()["advance"]
        assert adv["is_deducted"] is False
        assert adv["date"] == "2025-03-04"

        body = client.get("/advances/?m=2025-03").get_json()
        assert [a["staff_name"] for a in body["advances"]] == ["Asha"]
        assert body["total"].startswith("1500")
        assert client.get("/advances/?m=2025-04").get_json()["message"] == "no records"

    def test_amount_validation(self, login, add_staff):
        sid = add_staff("Asha", "petroleum")
        client = login(ROLE_MANAGER)
        for amount, code in [("", "no_amount"), ("abc", "bad_amount"), ("0", "bad_amount"), ("-20", "bad_amount"),
                             ("0.004", "bad_amount"), ("12.345", "bad_amount")]:
            r = client.post("/advances/", json={"staff_id": sid, "amount": amount, "date": "2025-03-04"})
            assert r.status_code == 400
            assert r.get_json()["error"] == code
        assert client.get("/advances/?m=2025-03").get_json()["advances"] == []

    def test_inactive_staff_rejected(self, login, add_staff):
        sid = add_staff("Old", "office", active=False)
        r = login(ROLE_MANAGER).post("/advances/", json={"staff_id": sid, "amount": "100"})
        assert r.get_json()["error"] == "inactive_staff"

    def test_pending_list_spans_months(self, login, add_staff, add_advance):
        sid = add_staff("Asha", "petroleum")
        add_advance(sid, 100, date(2025, 1, 5))
        add_advance(sid, 200, date(2025, 3, 5))
        add_advance(sid, 300, date(2025, 3, 6), deducted=True)
        body = login(ROLE_MANAGER).get("/advances/?pending=1").get_json()
        assert sorted(a["amount"] for a in body["advances"]) == ["100.00", "200.00"]

    def test_delete_and_bulk_delete(self, login, add_staff, add_advance):
        sid = add_staff("Asha", "petroleum")
        a1 = add_advance(sid, 100, date(2025, 3, 1))
        a2 = add_advance(sid, 200, date(2025, 3, 2))
        a3 = add_advance(sid, 300, date(2025, 3, 3))
        client = login(ROLE_MANAGER)

        assert client.post(f"/advances/{a1}/delete", json={}).get_json()["error"] == "confirm_required"
        assert client.post(f"/advances/{a1}/delete", json={"confirm": True}).get_json()["deleted"] == [a1]

        r = client.post("/advances/bulk-delete", json={"ids": [a2, a3], "confirm": True})
        assert r.get_json()["deleted"] == sorted([a2, a3])
        assert client.get("/advances/?m=2025-03").get_json()["advances"] == []

    def test_bulk_delete_is_all_or_nothing(self, login, add_staff, add_advance):
        sid = add_staff("Asha", "petroleum")
        a1 = add_advance(sid, 100, date(2025, 3, 1))
        client = login(ROLE_MANAGER)
        r = client.post("/advances/bulk-delete", json={"ids": [a1, 9999], "confirm": True})
        assert r.status_code == 404
        assert len(client.get("/advances/?m=2025-03").get_json()["advances"]) == 1

    def test_manual_deduct_override(self, login, add_staff, add_advance):
        sid = add_staff("Asha", "petroleum")
        aid = add_advance(sid, 100, date(2025, 3, 1))
        client = login(ROLE_MANAGER)
        assert client.post(f"/advances/{aid}/deduct").get_json()["advance"]["is_deducted"] is True
        r = client.post(f"/advances/{aid}/undeduct").get_json()["advance"]
        assert r["is_deducted"] is False
        assert r["deducted_in_id"] is None

    def test_scoped_admin(self, login, add_staff, add_advance):
        sid = add_staff("Asha", "petroleum")
        aid = add_advance(sid, 100, date(2025, 3, 1))
        client = login(ROLE_CRUSHER_ADMIN)
        assert client.post(f"/advances/{aid}/delete", json={"confirm": True}).status_code == 403
        assert client.post("/advances/", json={"staff_id": sid, "amount": "10"}).status_code == 403


class TestExports:
    def test_xlsx_summary_uses_rupee(self, login, add_staff, add_advance):
        sid = add_staff("Asha", "petroleum")
        add_advance(sid, 1500, date(2025, 3, 1))
        r = login(ROLE_MANAGER).get("/advances/export.xlsx?m=2025-03")
        assert r.status_code == 200
        ws = load_workbook(BytesIO(r.data)).active
        column_a = [row[0].value for row in ws.iter_rows()]
        assert "Total: ₹1,500" in column_a
        assert "Pending: ₹1,500" in column_a
        assert not any(isinstance(v, str) and "Rs." in v for v in column_a)

    def test_pdf(self, login, add_staff, add_advance):
        sid = add_staff("Asha", "petroleum")
        add_advance(sid, 1500, date(2025, 3, 1))
        r = login(ROLE_MANAGER).get("/advances/export.pdf?m=2025-03")
        assert r.data.startswith(b"%PDF")
