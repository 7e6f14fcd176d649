# -*- coding: utf-8 -*-
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from flask import Blueprint, current_app, request
from flask_login import login_required

from ...acl import ROLE_MANAGER, ROLE_PETROLEUM_ADMIN
from ...errors import NotFound, ValidationError
from ...extensions import db
from ...exports import Report, download
from ...exports.pdf import render_pdf
from ...exports.share import share_payload
from ...exports.xlsx import render_xlsx
from ...logger import get_logger
from ...models.ledger import CreditParty, CreditTransaction, FuelType, TransactionType
from ...money import D, PAISA, fmt_inr, fmt_pdf, parse_amount
from ...periods import month_bounds, parse_day, parse_period, period_label
from ...persistence import commit
from ...security import current_auth, roles_required
from ...web import flag_arg, listing, ok, payload, require_confirm

logger = get_logger("credit")

bp = Blueprint("credit", __name__, url_prefix="/credit")

# credit sales run through the fuel pump
CREDIT_ROLES = (ROLE_MANAGER, ROLE_PETROLEUM_ADMIN)


# ------------ helpers ---------------------------------------------------------
def load_party(party_id: int) -> CreditParty:
    p = db.session.get(CreditParty, party_id)
    if not p:
        raise NotFound(f"party #{party_id} not found")
    return p


def load_transaction(txn_id: int) -> CreditTransaction:
    t = db.session.get(CreditTransaction, txn_id)
    if not t:
        raise NotFound(f"transaction #{txn_id} not found")
    return t


def party_balance(party_id: int) -> dict:
    """Debits (fuel, tyres, manual) minus payments received."""
    debit = Decimal("0")
    paid = Decimal("0")
    for t in CreditTransaction.query.filter_by(party_id=party_id).all():
        if t.is_credit:
            paid += D(t.amount)
        else:
            debit += D(t.amount)
    return {"total_debit": str(debit), "total_paid": str(paid), "balance": str(debit - paid)}


def _party_fields(p: CreditParty, data: dict[str, Any], creating: bool) -> None:
    if creating or "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("name is required", code="no_name")
        p.name = name
    for field in ("phone", "address", "notes"):
        if field in data:
            setattr(p, field, (data.get(field) or "").strip())


def _txn_fields(t: CreditTransaction, data: dict[str, Any], creating: bool) -> None:
    kind = (data.get("kind") or data.get("type") or (t.kind if not creating else "")).strip().lower()
    try:
        kind = TransactionType(kind).value
    except ValueError:
        raise ValidationError(
            f"kind must be one of: {', '.join(k.value for k in TransactionType)}", code="bad_kind"
        ) from None
    t.kind = kind

    if data.get("date"):
        t.day = parse_day(data.get("date"))
    elif creating:
        raise ValidationError("date is required", code="no_date")

    amount = data.get("amount")
    if kind == TransactionType.PETROLEUM.value:
        try:
            t.fuel_type = FuelType((data.get("fuel_type") or t.fuel_type or "").strip().lower()).value
        except ValueError:
            raise ValidationError("fuel_type must be diesel or petrol", code="bad_fuel_type") from None
        t.litres = parse_amount(data.get("litres", t.litres), field="litres")
        rate = data.get("rate_per_litre", t.rate_per_litre)
        t.rate_per_litre = parse_amount(rate, field="rate_per_litre") if rate not in (None, "") else None
        if amount in (None, "") and t.rate_per_litre is not None:
            amount = (D(t.litres) * D(t.rate_per_litre)).quantize(PAISA, rounding=ROUND_HALF_UP)
        t.tyre_name = None
    else:
        t.fuel_type = t.litres = t.rate_per_litre = None
        if kind == TransactionType.TYRE.value:
            tyre = (data.get("tyre_name") or t.tyre_name or "").strip()
            if not tyre:
                raise ValidationError("tyre_name is required", code="no_tyre_name")
            t.tyre_name = tyre
        else:
            t.tyre_name = None

    if amount in (None, "") and not creating:
        amount = t.amount
    t.amount = parse_amount(amount)

    if "notes" in data:
        t.notes = (data.get("notes") or "").strip()


def _transactions(party: CreditParty):
    """?m=YYYY-MM restricts to one month; ?all=1 (or nothing) is the whole history."""
    q = CreditTransaction.query.filter_by(party_id=party.id)
    label = f"{party.name} - statement"
    if request.args.get("m") and not flag_arg("all"):
        year, month = parse_period(request.args.get("m"))
        start, end = month_bounds(year, month)
        q = q.filter(CreditTransaction.day >= start, CreditTransaction.day <= end)
        label = f"{party.name} - {period_label(year, month)}"
    return q.order_by(CreditTransaction.day.asc(), CreditTransaction.id.asc()).all(), label


def _describe(t: CreditTransaction) -> str:
    if t.kind == TransactionType.PETROLEUM.value:
        return f"{(t.fuel_type or '').title()} {t.litres} L"
    if t.kind == TransactionType.TYRE.value:
        return t.tyre_name or ""
    return t.notes or ""


def _statement(party: CreditParty, rows, label: str, money, text_money) -> Report:
    bal = party_balance(party.id)
    return Report(
        title=label,
        subtitle=f"Phone: {party.phone}" if party.phone else "",
        headers=["Date", "Type", "Details", "Debit", "Payment"],
        rows=[
            [
                t.day.strftime("%d-%m-%Y"),
                t.kind.title(),
                _describe(t),
                "" if t.is_credit else money(t.amount),
                money(t.amount) if t.is_credit else "",
            ]
            for t in rows
        ],
        summary=[
            f"Total Debit: {text_money(bal['total_debit'])}",
            f"Total Paid: {text_money(bal['total_paid'])}",
            f"Balance: {text_money(bal['balance'])}",
        ],
    )


# ------------ parties ---------------------------------------------------------
@bp.get("/parties")
@login_required
@roles_required(*CREDIT_ROLES)
def parties():
    q = CreditParty.query
    if not flag_arg("include_inactive"):
        q = q.filter(CreditParty.is_active.is_(True))
    items = []
    for p in q.order_by(CreditParty.name.asc()).all():
        items.append({**p.to_dict(), **party_balance(p.id)})
    return listing("parties", items)


@bp.post("/parties")
@login_required
@roles_required(*CREDIT_ROLES)
def create_party():
    auth = current_auth()
    p = CreditParty(is_active=True)
    _party_fields(p, payload(), creating=True)
    db.session.add(p)
    commit("create party", logger)
    logger.info(f"credit party #{p.id} {p.name!r} created by user #{auth.user_id}")
    return ok(party=p.to_dict()), 201


@bp.post("/parties/<int:party_id>/update")
@login_required
@roles_required(*CREDIT_ROLES)
def update_party(party_id: int):
    p = load_party(party_id)
    _party_fields(p, payload(), creating=False)
    commit("update party", logger)
    return ok(party=p.to_dict())


@bp.post("/parties/<int:party_id>/deactivate")
@login_required
@roles_required(*CREDIT_ROLES)
def deactivate_party(party_id: int):
    auth = current_auth()
    require_confirm(payload())
    p = load_party(party_id)
    p.is_active = False
    commit("deactivate party", logger)
    logger.info(f"credit party #{p.id} deactivated by user #{auth.user_id}")
    return ok(party=p.to_dict())


@bp.get("/parties/<int:party_id>/balance")
@login_required
@roles_required(*CREDIT_ROLES)
def balance(party_id: int):
    p = load_party(party_id)
    return ok(party=p.to_dict(), **party_balance(p.id))


# ------------ transactions ----------------------------------------------------
@bp.get("/parties/<int:party_id>/transactions")
@login_required
@roles_required(*CREDIT_ROLES)
def transactions(party_id: int):
    p = load_party(party_id)
    rows, label = _transactions(p)
    return listing("transactions", [t.to_dict() for t in rows], label=label, **party_balance(p.id))


@bp.post("/parties/<int:party_id>/transactions")
@login_required
@roles_required(*CREDIT_ROLES)
def add_transaction(party_id: int):
    auth = current_auth()
    p = load_party(party_id)
    if not p.is_active:
        raise ValidationError("party is inactive", code="inactive_party")
    t = CreditTransaction(party_id=p.id)
    _txn_fields(t, payload(), creating=True)
    db.session.add(t)
    commit("add credit transaction", logger)
    logger.info(f"credit txn #{t.id} {t.kind} {t.amount} for party #{p.id} by user #{auth.user_id}")
    return ok(transaction=t.to_dict(), **party_balance(p.id)), 201


@bp.post("/transactions/<int:txn_id>/update")
@login_required
@roles_required(*CREDIT_ROLES)
def update_transaction(txn_id: int):
    auth = current_auth()
    t = load_transaction(txn_id)
    _txn_fields(t, payload(), creating=False)
    commit("update credit transaction", logger)
    logger.info(f"credit txn #{t.id} updated by user #{auth.user_id}")
    return ok(transaction=t.to_dict(), **party_balance(t.party_id))


@bp.post("/transactions/<int:txn_id>/delete")
@login_required
@roles_required(*CREDIT_ROLES)
def delete_transaction(txn_id: int):
    auth = current_auth()
    require_confirm(payload())
    t = load_transaction(txn_id)
    party_id = t.party_id
    db.session.delete(t)
    commit("delete credit transaction", logger)
    logger.info(f"credit txn #{txn_id} deleted by user #{auth.user_id}")
    return ok(deleted=txn_id, **party_balance(party_id))


# ------------ statements ------------------------------------------------------
@bp.get("/parties/<int:party_id>/statement.pdf")
@login_required
@roles_required(*CREDIT_ROLES)
def statement_pdf(party_id: int):
    p = load_party(party_id)
    rows, label = _transactions(p)
    data = render_pdf(_statement(p, rows, label, fmt_pdf, fmt_pdf), font_path=current_app.config.get("PDF_FONT_PATH"))
    return download(data, "pdf", label)


@bp.get("/parties/<int:party_id>/statement.xlsx")
@login_required
@roles_required(*CREDIT_ROLES)
def statement_xlsx(party_id: int):
    p = load_party(party_id)
    rows, label = _transactions(p)
    data = render_xlsx(_statement(p, rows, label, D, fmt_inr), sheet_name="Statement")
    return download(data, "xlsx", label)


@bp.get("/parties/<int:party_id>/share")
@login_required
@roles_required(*CREDIT_ROLES)
def share(party_id: int):
    p = load_party(party_id)
    rows, label = _transactions(p)
    bal = party_balance(p.id)
    lines = [f"*{label}*", ""]
    for t in rows:
        sign = "+" if t.is_credit else "-"
        lines.append(f"{t.day.strftime('%d-%m-%Y')} {t.kind.title()} {_describe(t)} {sign}{fmt_inr(t.amount)}")
    lines += [
        "",
        f"Total Debit: {fmt_inr(bal['total_debit'])}",
        f"Total Paid: {fmt_inr(bal['total_paid'])}",
        f"*Balance: {fmt_inr(bal['balance'])}*",
    ]
    return ok(**share_payload("\n".join(lines)))
