"""
Concurrency tests.

Each test runs against a file-backed SQLite database so that two nested app
contexts get two real connections. The outer context holds a stale copy of
a row while the inner one commits a change to it.

Verifies:
- Two admins approving the same report: one wins, stock decremented once
- Two edits of the same rejected report: one wins, one revision recorded
- Two first registrations: the one that loses the admin flag becomes staff
"""

from datetime import date

import pytest

from winehouse import create_app
from winehouse.errors import ConflictError
from winehouse.extensions import db
from winehouse.models import ProductStatusReport, ProductStatusRevision, Stock, SystemSetting, User
from winehouse.models.auth import ROLE_ADMIN, ROLE_STAFF
from winehouse.services import (
    auth_service,
    inventory_service,
    product_status_service,
    products_service,
    supplier_service,
    system_service,
)


@pytest.fixture
def file_app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'concurrency.db'}",
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BCRYPT_ROUNDS': 4,
    })
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def seeded(file_app):
    """Admin, staff and a pending damaged report for 2 of 10 units."""
    with file_app.app_context():
        admin = auth_service.register_user("owner", "owner-pass")
        staff = auth_service.register_user("clerk", "clerk-pass")
        product = products_service.create_product(actor=admin, name="Merlot 2020")
        supplier = supplier_service.create_supplier(actor=admin, name="Hillside", contact_number="09170000000")
        stock = inventory_service.add_stock(
            actor=admin,
            product_id=product.id,
            supplier_id=supplier.id,
            quantity=10,
            unit_price_cents=1200,
            date_added=date(2026, 1, 1),
            expiry_date=date(2030, 1, 1),
        )
        report = product_status_service.submit_report(
            actor=staff,
            product_id=product.id,
            report_type="damaged",
            quantity=2,
            notes="Two bottles cracked",
        )
        return {
            "admin_id": admin.id,
            "staff_id": staff.id,
            "stock_id": stock.id,
            "report_id": report.id,
        }


class TestConcurrentReview:

    def test_second_approval_conflicts_and_stock_drops_once(self, file_app, seeded):
        report_id = seeded["report_id"]

        with file_app.app_context():
            admin = db.session.get(User, seeded["admin_id"])
            stale = db.session.get(ProductStatusReport, report_id)
            assert stale.status == "pending"

            with file_app.app_context():
                other_admin = db.session.get(User, seeded["admin_id"])
                product_status_service.review_report(
                    actor=other_admin, report_id=report_id, decision="approved",
                )

            with pytest.raises(ConflictError, match="already approved"):
                product_status_service.review_report(
                    actor=admin, report_id=report_id, decision="approved",
                )

            db.session.expire_all()
            assert db.session.get(Stock, seeded["stock_id"]).quantity == 8
            assert db.session.get(ProductStatusReport, report_id).status == "approved"


class TestConcurrentRevision:

    def test_second_edit_conflicts_and_one_revision_kept(self, file_app, seeded):
        report_id = seeded["report_id"]

        with file_app.app_context():
            admin = db.session.get(User, seeded["admin_id"])
            product_status_service.review_report(
                actor=admin, report_id=report_id, decision="rejected", review_notes="Photo is blurry",
            )

        with file_app.app_context():
            staff = db.session.get(User, seeded["staff_id"])
            stale = db.session.get(ProductStatusReport, report_id)
            assert stale.status == "rejected"

            with file_app.app_context():
                same_staff = db.session.get(User, seeded["staff_id"])
                product_status_service.revise_report(
                    actor=same_staff, report_id=report_id, notes="Clearer photo attached",
                )

            with pytest.raises(ConflictError, match="Only rejected reports"):
                product_status_service.revise_report(
                    actor=staff, report_id=report_id, notes="Double-submitted edit",
                )

            db.session.expire_all()
            report = db.session.get(ProductStatusReport, report_id)
            assert report.status == "pending"
            assert report.notes == "Clearer photo attached"
            assert db.session.query(ProductStatusRevision).filter_by(report_id=report_id).count() == 1


class TestConcurrentBootstrap:

    def test_registration_that_loses_admin_flag_becomes_staff(self, file_app, monkeypatch):
        real_check = system_service.is_admin_bootstrapped
        checks = []

        def check_then_lose_race():
            # The first check sees no flag; another registration claims it
            # before this one commits.
            bootstrapped = real_check()
            if not checks:
                with file_app.app_context():
                    system_service.stage_admin_bootstrap("rival")
                    db.session.commit()
            checks.append(bootstrapped)
            return bootstrapped

        monkeypatch.setattr(system_service, "is_admin_bootstrapped", check_then_lose_race)

        with file_app.app_context():
            user = auth_service.register_user("late", "late-pass")

            assert user.role == ROLE_STAFF
            assert checks[:2] == [False, True]
            assert db.session.query(User).filter_by(role=ROLE_ADMIN).count() == 0
            flag = db.session.query(SystemSetting).filter_by(key=system_service.ADMIN_BOOTSTRAP_KEY).one()
            assert flag.value.startswith("rival@")
