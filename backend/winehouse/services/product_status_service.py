# Overview: Service-layer operations for expired/damaged product reports.

"""
Product Status Workflow

WHY: Expired and damaged bottles leave the shelf without a sale. Staff
report them; an admin confirms before the units come off stock.

LIFECYCLE:
    pending --review(approved)--> approved   (stock decremented)
    pending --review(rejected)--> rejected
    rejected --revise(reporter)--> pending   (rejected version kept)

RULES:
- Only pending reports can be reviewed, only by an admin.
- Only the original reporter can revise, only while rejected.
- Revision history is append-only.
- Approval decrements the report's stock lot in the same DB transaction
  as the status change. If the lot no longer covers the quantity the
  review fails and the report stays pending.
"""

from __future__ import annotations

import csv
import io

from flask import current_app

from ..errors import ConflictError, InsufficientStockError, NotFoundError, PermissionDeniedError, ValidationError
from ..extensions import db
from ..models import ProductStatusReport, ProductStatusRevision, User
from ..models.product_status import (
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    VALID_STATUSES,
    VALID_TYPES,
)
from ..validation import coerce_int, optional_text, require_positive_int, require_text
from .activity_service import append_activity
from .communications_service import notify_admins, notify_user
from .concurrency import lock_for_update, run_with_retry
from .inventory_service import decrement_stock, require_stock_for_product
from .permission_service import require_admin
from .products_service import get_product
from winehouse.time_utils import utcnow, to_iso_date


REVIEW_DECISIONS = {STATUS_APPROVED, STATUS_REJECTED}

EXPORT_COLUMNS = ["Product", "Type", "Quantity", "Status", "Reported By", "Date"]


def _require_type(value) -> str:
    report_type = str(value or "").strip().lower()
    if report_type not in VALID_TYPES:
        raise ValidationError("Type must be 'expired' or 'damaged'")
    return report_type


def get_report(report_id: int) -> ProductStatusReport:
    report = db.session.query(ProductStatusReport).filter_by(id=report_id).first()
    if not report:
        raise NotFoundError("Report not found")
    return report


def list_reports(
    *,
    report_type: str | None = None,
    status: str | None = None,
    reported_by_user_id: int | None = None,
) -> list[ProductStatusReport]:
    """Newest first, optionally filtered by type, status and reporter."""
    q = db.session.query(ProductStatusReport)
    if report_type:
        q = q.filter(ProductStatusReport.type == _require_type(report_type))
    if status:
        if status not in VALID_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        q = q.filter(ProductStatusReport.status == status)
    if reported_by_user_id is not None:
        q = q.filter(ProductStatusReport.reported_by_user_id == reported_by_user_id)
    return q.order_by(ProductStatusReport.reported_at.desc(), ProductStatusReport.id.desc()).all()


def submit_report(*, actor: User, product_id, report_type, quantity, notes, image_url=None) -> ProductStatusReport:
    """
    File a pending expired/damaged report against a product's stock lot.

    The quantity must not exceed what the lot currently holds. Nothing is
    taken off stock until an admin approves.
    """
    report_type = _require_type(report_type)
    qty = require_positive_int(quantity, "Quantity")
    notes = require_text(notes, "Notes")

    product = get_product(coerce_int(product_id, "product_id"))
    stock = require_stock_for_product(product.id)
    if qty > stock.quantity:
        raise InsufficientStockError(
            f"Quantity exceeds available stock ({stock.quantity} units)"
        )

    report = ProductStatusReport(
        product_id=product.id,
        stock_id=stock.id,
        product_name=product.name,
        type=report_type,
        quantity=qty,
        notes=notes,
        image_url=optional_text(image_url, field="image_url"),
        status=STATUS_PENDING,
        reported_by_user_id=actor.id,
        reported_by_username=actor.username,
        reported_at=utcnow(),
    )
    db.session.add(report)
    db.session.flush()

    append_activity(
        actor=actor,
        action=f"Reported {report_type} product",
        details=f"{product.name} - {qty} units",
    )
    notify_admins(
        f"New {report_type.capitalize()} Product Report",
        f"{actor.username} reported {qty} {report_type} units of {product.name}",
    )
    db.session.commit()
    return report


def review_report(*, actor: User, report_id: int, decision, review_notes=None) -> ProductStatusReport:
    """
    Approve or reject a pending report. Admin only.

    Runs under run_with_retry: a concurrent review bumps version_id, our
    commit then fails with StaleDataError, and the retry re-reads the report
    and sees it is no longer pending.
    """
    require_admin(actor)

    decision = str(decision or "").strip().lower()
    if decision not in REVIEW_DECISIONS:
        raise ValidationError("Decision must be 'approved' or 'rejected'")

    notes = optional_text(review_notes, field="review_notes")
    notes_required = (
        decision == STATUS_REJECTED
        and not notes
        and current_app.config.get("REQUIRE_REJECTION_NOTES", True)
    )

    def _review() -> ProductStatusReport:
        report = lock_for_update(
            db.session.query(ProductStatusReport).filter_by(id=report_id)
        ).first()
        if not report:
            raise NotFoundError("Report not found")
        if report.status != STATUS_PENDING:
            raise ConflictError(f"Report is already {report.status}")
        if notes_required:
            raise ValidationError("Please provide a reason for rejection")

        if decision == STATUS_APPROVED:
            # Raises InsufficientStockError before anything is written
            decrement_stock(report.stock_id, report.quantity)

        report.status = decision
        report.reviewed_by_user_id = actor.id
        report.reviewed_by_username = actor.username
        report.reviewed_at = utcnow()
        report.review_notes = notes

        append_activity(
            actor=actor,
            action=f"{decision.capitalize()} {report.type} product",
            details=f"{report.product_name} - {report.quantity} units",
        )
        if report.reported_by_user_id:
            if decision == STATUS_APPROVED:
                notify_user(
                    report.reported_by_user_id,
                    "Report Approved",
                    f"Your {report.type} report for {report.product_name} was approved",
                )
            else:
                notify_user(
                    report.reported_by_user_id,
                    "Report Rejected",
                    f"Your {report.type} report for {report.product_name} was rejected. "
                    f"Reason: {notes or 'No reason given'}",
                )
        db.session.commit()
        return report

    return run_with_retry(_review)


def revise_report(*, actor: User, report_id: int, notes, image_url=None) -> ProductStatusReport:
    """
    Edit a rejected report and send it back for review. Reporter only.

    The rejected version (notes, image, review notes, status, time) is
    appended to the report's history before the new values are applied.
    A missing image_url keeps the current image.

    Runs under run_with_retry like review_report: of two concurrent edits
    only one commits, the other re-reads a pending report and fails.
    """
    new_notes = require_text(notes, "Notes")
    new_image_url = optional_text(image_url, field="image_url") if image_url is not None else None

    def _revise() -> ProductStatusReport:
        report = lock_for_update(
            db.session.query(ProductStatusReport).filter_by(id=report_id)
        ).first()
        if not report:
            raise NotFoundError("Report not found")
        if report.reported_by_user_id != actor.id:
            raise PermissionDeniedError("Only the original reporter can edit this report")
        if report.status != STATUS_REJECTED:
            raise ConflictError("Only rejected reports can be edited")

        now = utcnow()
        report.revisions.append(
            ProductStatusRevision(
                sequence=len(report.revisions) + 1,
                notes=report.notes,
                image_url=report.image_url,
                review_notes=report.review_notes,
                status=report.status,
                recorded_at=now,
            )
        )

        report.notes = new_notes
        if image_url is not None:
            report.image_url = new_image_url
        report.status = STATUS_PENDING
        report.reviewed_by_user_id = None
        report.reviewed_by_username = None
        report.reviewed_at = None
        report.review_notes = None
        report.edited_at = now

        append_activity(
            actor=actor,
            action="Edited product status report",
            details=f"{report.product_name} - {report.type}",
        )
        notify_admins(
            "Product Report Updated",
            f"{actor.username} updated their {report.type} report for {report.product_name}",
        )
        db.session.commit()
        return report

    return run_with_retry(_revise)


def export_reports_csv(report_type: str | None = None) -> str:
    """Tabular export of reports as CSV text, newest first."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(EXPORT_COLUMNS)
    for report in list_reports(report_type=report_type):
        writer.writerow([
            report.product_name,
            report.type,
            report.quantity,
            report.status,
            report.reported_by_username,
            to_iso_date(report.reported_at.date()) if report.reported_at else "",
        ])
    return buf.getvalue()
