"""
Endpoint tests for payroll: summary, live vs committed view, pay/unpay,
exports and the share link.
"""

from datetime import date
from io import BytesIO
from urllib.parse import unquote

import pytest
from openpyxl import load_workbook

from staff_manager.acl import ROLE_CRUSHER_ADMIN, ROLE_MANAGER


@pytest.fixture
def march(add_staff, add_shifts, add_advance):
    """Ramesh: rate 500, 30 shifts, 3000 advance in March 2025."""
    sid = add_staff("Ramesh", "petroleum", shift_rate=500)
    add_shifts(sid, 2025, 3, 30)
    add_advance(sid, 3000, date(2025, 3, 10))
    return sid


class TestSummary:
    def test_department_summary(self, login, march, add_staff):
        add_staff("Suresh", "petroleum", shift_rate=400)
        body = login(ROLE_MANAGER).get("/payroll/?m=2025-03&category=petroleum").get_json()
        assert body["period"] == "2025-03"
        assert [r["name"] for r in body["salaries"]] == ["Ramesh", "Suresh"]
        assert body["salaries"][0]["payable"] == "12000.00"
        assert body["totals"]["staff_count"] == 2
        assert body["totals"]["payable"] == "12000.00"

    def test_bad_period_and_category(self, login):
        client = login(ROLE_MANAGER)
        assert client.get("/payroll/?m=2025-00").get_json()["error"] == "bad_period"
        assert client.get("/payroll/?category=driver").get_json()["error"] == "bad_category"

    def test_empty(self, login):
        body = login(ROLE_MANAGER).get("/payroll/?m=2025-03").get_json()
        assert body["salaries"] == []
        assert body["message"] == "no records"

    def test_view_live_and_committed(self, login, march):
        client = login(ROLE_MANAGER)
        body = client.get(f"/payroll/{march}?m=2025-03").get_json()
        assert body["salary"]["payable"] == "12000.00"
        assert body["committed"] is None


class TestPayUnpay:
    def test_pay_requires_confirm(self, login, march, salary_record):
        r = login(ROLE_MANAGER).post(f"/payroll/{march}/pay", json={"m": "2025-03"})
        assert r.status_code == 400
        assert r.get_json()["error"] == "confirm_required"
        assert salary_record(march, 2025, 3) is None

    def test_pay_then_unpay(self, login, march, add_shifts, salary_record):
        add_shifts(march, 2025, 4, 10)
        client = login(ROLE_MANAGER)

        r = client.post(f"/payroll/{march}/pay", json={"m": "2025-03", "confirm": True, "expected_payable": "12000"})
        assert r.status_code == 200
        body = r.get_json()
        assert body["record"]["is_paid"] is True
        assert body["record"]["paid_at"] is not None
        assert body["salary"]["pending_advances"] == "0"
        assert client.get(f"/payroll/{march}?m=2025-04").get_json()["salary"]["payable"] == "5000.00"

        view = client.get(f"/payroll/{march}?m=2025-03").get_json()
        assert view["committed"]["net_payable"] == "12000.00"

        r = client.post(f"/payroll/{march}/unpay", json={"m": "2025-03", "confirm": True})
        assert r.get_json()["record"]["is_paid"] is False
        assert salary_record(march, 2025, 3)["paid_at"] is None
        assert client.get(f"/payroll/{march}?m=2025-04").get_json()["salary"]["payable"] == "17000.00"

    def test_stale_expected_payable(self, login, march, salary_record):
        r = login(ROLE_MANAGER).post(
            f"/payroll/{march}/pay", json={"m": "2025-03", "confirm": True, "expected_payable": "15000"}
        )
        assert r.status_code == 409
        assert r.get_json()["error"] == "stale_calculation"
        assert salary_record(march, 2025, 3) is None

    def test_unpay_without_record(self, login, march):
        r = login(ROLE_MANAGER).post(f"/payroll/{march}/unpay", json={"m": "2025-03", "confirm": True})
        assert r.status_code == 404

    def test_unpay_restores_advances_when_configured(self, app, login, march):
        app.config["UNPAID_RESTORES_ADVANCES"] = True
        client = login(ROLE_MANAGER)
        client.post(f"/payroll/{march}/pay", json={"m": "2025-03", "confirm": True})
        client.post(f"/payroll/{march}/unpay", json={"m": "2025-03", "confirm": True})
        pending = client.get("/advances/?pending=1").get_json()["advances"]
        assert [a["amount"] for a in pending] == ["3000.00"]

    def test_scoped_admin(self, login, march):
        r = login(ROLE_CRUSHER_ADMIN).post(f"/payroll/{march}/pay", json={"m": "2025-03", "confirm": True})
        assert r.status_code == 403


class TestExports:
    def test_pdf(self, login, march):
        r = login(ROLE_MANAGER).get("/payroll/export.pdf?m=2025-03")
        assert r.status_code == 200
        assert r.mimetype == "application/pdf"
        assert r.data.startswith(b"%PDF")
        assert "Salary_Report_2025-03.pdf" in r.headers["Content-Disposition"]

    def test_xlsx(self, login, march):
        r = login(ROLE_MANAGER).get("/payroll/export.xlsx?m=2025-03")
        assert r.status_code == 200
        ws = load_workbook(BytesIO(r.data)).active
        values = [[c.value for c in row] for row in ws.iter_rows()]
        assert values[0][0] == "Salary Report - March 2025"
        assert values[1][0] == "Tibrewal Staff Manager"
        header_idx = next(i for i, row in enumerate(values) if row[0] == "Name")
        assert values[header_idx][:3] == ["Name", "Category", "Shifts"]
        assert values[header_idx + 1][0] == "Ramesh"
        assert values[-2][0] == "Note: If you have any queries, contact 6203229118"
        assert values[-1][0].startswith("नोट:")

    def test_xlsx_summary_uses_rupee(self, login, march):
        ws = load_workbook(BytesIO(login(ROLE_MANAGER).get("/payroll/export.xlsx?m=2025-03").data)).active
        column_a = [row[0].value for row in ws.iter_rows()]
        assert "Total Payable: ₹12,000" in column_a
        assert "Total Advances: ₹3,000" in column_a
        assert "Paid: 0 of 1" in column_a

    def test_share(self, login, march):
        body = login(ROLE_MANAGER).get("/payroll/share?m=2025-03").get_json()
        assert "⏳ Ramesh (petroleum)" in body["text"]
        assert "₹12,000" in body["text"]
        assert body["url"].startswith("https://wa.me/?text=")
        assert unquote(body["url"].split("text=", 1)[1]) == body["text"]
