from __future__ import annotations

from html import escape

from .models import TRAVEL_TYPE_LABELS, CalculatedAllowances, TravelType
from .validation import ValidationResult

TRAVEL_TYPE_BADGES = {
    TravelType.SHORT_STAY: "default",
    TravelType.LONG_STAY: "secondary",
    TravelType.REPORTABLE_LAFHA: "destructive",
    TravelType.ABORIGINAL_LAND: "outline",
}


def render_validation_summary(validation: ValidationResult) -> str:
    if validation.valid:
        return (
            '<section class="validation-summary success">'
            "<h2>Validation Summary</h2>"
            "<p>Ready to continue ✅</p>"
            "</section>"
        )

    items = "".join(f"<li>{escape(message)}</li>" for message in validation.blockers)
    return (
        '<section class="validation-summary error">'
        "<h2>Validation Summary</h2>"
        "<p>Resolve the issues below before moving to the next step.</p>"
        f"<ul>{items}</ul>"
        "</section>"
    )


def render_allowance_summary(allowances: CalculatedAllowances) -> str:
    label = TRAVEL_TYPE_LABELS[allowances.travel_type]
    badge = TRAVEL_TYPE_BADGES[allowances.travel_type]
    rows = [
        ("Accommodation", allowances.accommodation),
        ("Meals", allowances.meals),
        ("Private vehicle", allowances.vehicle),
        ("Uplifts", allowances.uplifts),
        ("Total", allowances.total),
    ]
    table = "".join(f"<tr><td>{name}</td><td>${amount}</td></tr>" for name, amount in rows)
    codes = "".join(
        f"<li>{escape(code.value)} &ndash; {escape(code.description)}</li>"
        for code in allowances.sap_codes
    )
    flags = []
    if allowances.fbt_applicable:
        flags.append("<p>FBT applicable</p>")
    if allowances.receipt_required:
        flags.append("<p>Receipts required</p>")
    return (
        '<section class="allowance-summary">'
        f'<h2>{escape(label)} <span class="badge badge-{badge}">'
        f"{allowances.total_nights} nights / {allowances.total_days} days</span></h2>"
        f"<table>{table}</table>"
        f"<ul>{codes}</ul>"
        f"{''.join(flags)}"
        "</section>"
    )
