"""
Expired/damaged report workflow tests.

Verifies:
- Submission creates a pending report and notifies every admin
- Approval decrements the report's stock lot by exactly the report quantity
- Rejection leaves stock alone and requires a reason
- Only pending reports can be reviewed, only by an admin
- Only the reporter can revise, only a rejected report, and the rejected
  version is kept in the report's history
"""

import csv
import io

import pytest

from winehouse.errors import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from winehouse.models import ActivityLog, Notification, ProductStatusRevision, Stock
from winehouse.services import product_status_service, sales_service


@pytest.fixture
def damaged_report(db_session, staff, stock, product):
    return product_status_service.submit_report(
        actor=staff,
        product_id=product.id,
        report_type="damaged",
        quantity=2,
        notes="Two bottles cracked in the back room",
        image_url="https://img/cracked.jpg",
    )


def _notifications(db_session, user_id):
    return db_session.query(Notification).filter_by(user_id=user_id).order_by(Notification.id).all()


class TestSubmit:

    def test_submit_creates_pending_report(self, db_session, staff, stock, damaged_report):
        assert damaged_report.status == "pending"
        assert damaged_report.stock_id == stock.id
        assert damaged_report.reported_by_username == "clerk"
        assert damaged_report.revisions == []

        # Nothing comes off stock until approval
        assert db_session.get(Stock, stock.id).quantity == 10

        entry = db_session.query(ActivityLog).filter_by(action="Reported damaged product").one()
        assert entry.details == "Cabernet Sauvignon 2019 - 2 units"

    def test_submit_notifies_every_admin(self, db_session, admin, damaged_report):
        titles = [n.title for n in _notifications(db_session, admin.id)]
        assert titles == ["New Damaged Product Report"]

    def test_quantity_cannot_exceed_stock(self, db_session, staff, stock, product):
        with pytest.raises(InsufficientStockError):
            product_status_service.submit_report(
                actor=staff, product_id=product.id, report_type="expired", quantity=11, notes="All gone off",
            )

    @pytest.mark.parametrize("report_type", ["broken", "", None])
    def test_invalid_type(self, db_session, staff, stock, product, report_type):
        with pytest.raises(ValidationError):
            product_status_service.submit_report(
                actor=staff, product_id=product.id, report_type=report_type, quantity=1, notes="?",
            )

    def test_notes_required(self, db_session, staff, stock, product):
        with pytest.raises(ValidationError, match="Notes is required"):
            product_status_service.submit_report(
                actor=staff, product_id=product.id, report_type="expired", quantity=1, notes="   ",
            )

    def test_unknown_product(self, db_session, staff):
        with pytest.raises(NotFoundError):
            product_status_service.submit_report(
                actor=staff, product_id=12345, report_type="expired", quantity=1, notes="x",
            )


class TestReview:

    def test_approve_decrements_stock_and_notifies_reporter(self, db_session, admin, staff, stock, damaged_report):
        report = product_status_service.review_report(
            actor=admin, report_id=damaged_report.id, decision="approved",
        )

        assert report.status == "approved"
        assert report.reviewed_by_username == "owner"
        assert report.reviewed_at is not None
        assert db_session.get(Stock, stock.id).quantity == 8

        titles = [n.title for n in _notifications(db_session, staff.id)]
        assert titles == ["Report Approved"]
        assert db_session.query(ActivityLog).filter_by(action="Approved damaged product").count() == 1

    def test_reject_leaves_stock_unchanged(self, db_session, admin, staff, stock, damaged_report):
        report = product_status_service.review_report(
            actor=admin, report_id=damaged_report.id, decision="rejected", review_notes="blurry photo",
        )

        assert report.status == "rejected"
        assert report.review_notes == "blurry photo"
        assert db_session.get(Stock, stock.id).quantity == 10

        rejected = _notifications(db_session, staff.id)[-1]
        assert rejected.title == "Report Rejected"
        assert "blurry photo" in rejected.message

    def test_reject_requires_reason(self, db_session, admin, damaged_report):
        with pytest.raises(ValidationError, match="reason"):
            product_status_service.review_report(
                actor=admin, report_id=damaged_report.id, decision="rejected", review_notes="  ",
            )
        assert product_status_service.get_report(damaged_report.id).status == "pending"

    def test_reject_without_reason_when_not_required(self, app, db_session, admin, damaged_report):
        app.config["REQUIRE_REJECTION_NOTES"] = False
        try:
            report = product_status_service.review_report(
                actor=admin, report_id=damaged_report.id, decision="rejected",
            )
        finally:
            app.config["REQUIRE_REJECTION_NOTES"] = True
        assert report.status == "rejected"
        assert report.review_notes is None

    def test_only_pending_reports_can_be_reviewed(self, db_session, admin, stock, damaged_report):
        product_status_service.review_report(actor=admin, report_id=damaged_report.id, decision="approved")

        with pytest.raises(ConflictError):
            product_status_service.review_report(actor=admin, report_id=damaged_report.id, decision="approved")
        # Second approval must not take stock twice
        assert db_session.get(Stock, stock.id).quantity == 8

    def test_staff_cannot_review(self, db_session, staff, damaged_report):
        with pytest.raises(PermissionDeniedError):
            product_status_service.review_report(actor=staff, report_id=damaged_report.id, decision="approved")

    def test_unknown_report(self, db_session, admin):
        with pytest.raises(NotFoundError):
            product_status_service.review_report(actor=admin, report_id=999, decision="approved")

    def test_unknown_report_rejected_without_reason(self, db_session, admin):
        with pytest.raises(NotFoundError):
            product_status_service.review_report(actor=admin, report_id=999, decision="rejected")

    def test_reviewed_report_rejected_without_reason(self, db_session, admin, stock, damaged_report):
        product_status_service.review_report(actor=admin, report_id=damaged_report.id, decision="approved")

        with pytest.raises(ConflictError, match="already approved"):
            product_status_service.review_report(actor=admin, report_id=damaged_report.id, decision="rejected")

    def test_invalid_decision(self, db_session, admin, damaged_report):
        with pytest.raises(ValidationError):
            product_status_service.review_report(actor=admin, report_id=damaged_report.id, decision="pending")

    def test_approve_with_insufficient_stock_stays_pending(self, db_session, admin, staff, stock, product, damaged_report):
        # Sales drain the lot after the report was filed
        sales_service.post_transaction(actor=staff, product_id=product.id, quantity=9, unit_price_cents=1500)

        with pytest.raises(InsufficientStockError):
            product_status_service.review_report(actor=admin, report_id=damaged_report.id, decision="approved")

        assert product_status_service.get_report(damaged_report.id).status == "pending"
        assert db_session.get(Stock, stock.id).quantity == 1


class TestRevise:

    def _reject(self, admin, report, reason="blurry photo"):
        return product_status_service.review_report(
            actor=admin, report_id=report.id, decision="rejected", review_notes=reason,
        )

    def test_revise_rejected_report_keeps_history(self, db_session, admin, staff, damaged_report):
        rejected = self._reject(admin, damaged_report)
        original_notes = rejected.notes
        original_image = rejected.image_url

        report = product_status_service.revise_report(
            actor=staff, report_id=damaged_report.id, notes="clearer photo, bottle cracked",
        )

        assert report.status == "pending"
        assert report.notes == "clearer photo, bottle cracked"
        assert report.image_url == original_image
        assert report.edited_at is not None
        assert report.reviewed_by_user_id is None
        assert report.review_notes is None

        assert len(report.revisions) == 1
        previous = report.revisions[0]
        assert previous.sequence == 1
        assert previous.notes == original_notes
        assert previous.image_url == original_image
        assert previous.review_notes == "blurry photo"
        assert previous.status == "rejected"
        assert previous.recorded_at is not None

        admin_titles = [n.title for n in _notifications(db_session, admin.id)]
        assert admin_titles[-1] == "Product Report Updated"
        assert db_session.query(ActivityLog).filter_by(action="Edited product status report").count() == 1

    def test_history_is_append_only_across_cycles(self, db_session, admin, staff, damaged_report):
        self._reject(admin, damaged_report, "blurry photo")
        product_status_service.revise_report(actor=staff, report_id=damaged_report.id, notes="second try")
        self._reject(admin, damaged_report, "still blurry")
        report = product_status_service.revise_report(
            actor=staff, report_id=damaged_report.id, notes="third try", image_url="https://img/new.jpg",
        )

        assert [r.sequence for r in report.revisions] == [1, 2]
        assert [r.review_notes for r in report.revisions] == ["blurry photo", "still blurry"]
        assert [r.notes for r in report.revisions] == ["Two bottles cracked in the back room", "second try"]
        assert report.image_url == "https://img/new.jpg"
        assert db_session.query(ProductStatusRevision).count() == 2

    def test_only_reporter_can_revise(self, db_session, admin, other_staff, damaged_report):
        self._reject(admin, damaged_report)
        with pytest.raises(PermissionDeniedError):
            product_status_service.revise_report(actor=other_staff, report_id=damaged_report.id, notes="mine now")

    def test_pending_report_cannot_be_revised(self, db_session, staff, damaged_report):
        with pytest.raises(ConflictError):
            product_status_service.revise_report(actor=staff, report_id=damaged_report.id, notes="edit")

    def test_approved_report_cannot_be_revised(self, db_session, admin, staff, damaged_report):
        product_status_service.review_report(actor=admin, report_id=damaged_report.id, decision="approved")
        with pytest.raises(ConflictError):
            product_status_service.revise_report(actor=staff, report_id=damaged_report.id, notes="edit")

    def test_revised_report_can_be_approved(self, db_session, admin, staff, stock, damaged_report):
        self._reject(admin, damaged_report)
        product_status_service.revise_report(actor=staff, report_id=damaged_report.id, notes="better photo")

        report = product_status_service.review_report(actor=admin, report_id=damaged_report.id, decision="approved")
        assert report.status == "approved"
        assert db_session.get(Stock, stock.id).quantity == 8


class TestListAndExport:

    def test_filters(self, db_session, staff, stock, product, damaged_report):
        product_status_service.submit_report(
            actor=staff, product_id=product.id, report_type="expired", quantity=1, notes="Past date",
        )

        assert len(product_status_service.list_reports()) == 2
        assert [r.type for r in product_status_service.list_reports(report_type="expired")] == ["expired"]
        assert len(product_status_service.list_reports(status="approved")) == 0
        assert len(product_status_service.list_reports(reported_by_user_id=staff.id)) == 2

    def test_export_csv(self, db_session, damaged_report):
        body = product_status_service.export_reports_csv("damaged")
        rows = list(csv.reader(io.StringIO(body)))

        assert rows[0] == ["Product", "Type", "Quantity", "Status", "Reported By", "Date"]
        assert rows[1][:5] == ["Cabernet Sauvignon 2019", "damaged", "2", "pending", "clerk"]
        assert len(rows) == 2
