"""
Catalog, stock and sales tests.

Verifies:
- Admin-only catalog writes with activity entries
- Stock lot validation (quantity, price, expiry after date added)
- Atomic decrement never takes stock below zero
- Posting a sale larger than the lot fails and leaves the lot unchanged
"""

from datetime import date

import pytest

from winehouse.errors import InsufficientStockError, NotFoundError, PermissionDeniedError, ValidationError
from winehouse.models import ActivityLog, Stock, Transaction
from winehouse.services import inventory_service, products_service, sales_service, supplier_service


class TestCatalog:

    def test_create_product_logs_activity(self, db_session, admin):
        product = products_service.create_product(actor=admin, name="  Merlot 2020 ", image_url="https://img/merlot.png")

        assert product.name == "Merlot 2020"
        assert product.created_by_user_id == admin.id
        entry = db_session.query(ActivityLog).filter_by(action="Added new product").one()
        assert entry.details == "Added product: Merlot 2020"

    def test_staff_cannot_create_product(self, db_session, staff):
        with pytest.raises(PermissionDeniedError):
            products_service.create_product(actor=staff, name="Rose")

    def test_product_name_required(self, db_session, admin):
        with pytest.raises(ValidationError):
            products_service.create_product(actor=admin, name="")

    def test_get_unknown_product(self, db_session):
        with pytest.raises(NotFoundError):
            products_service.get_product(404)

    def test_create_supplier(self, db_session, admin):
        supplier = supplier_service.create_supplier(actor=admin, name="Cellar Co", contact_number="09998887777")

        assert supplier.contact_number == "09998887777"
        assert db_session.query(ActivityLog).filter_by(action="Added new supplier").count() == 1

    def test_supplier_contact_number_must_be_11_digits(self, db_session, admin):
        with pytest.raises(ValidationError, match="11 digits"):
            supplier_service.create_supplier(actor=admin, name="Cellar Co", contact_number="0999888")


class TestAddStock:

    def test_add_stock_snapshots_names(self, db_session, stock, product, supplier):
        assert stock.quantity == 10
        assert stock.product_name == product.name
        assert stock.supplier_name == supplier.name
        assert stock.unit_price_cents == 1500
        assert db_session.query(ActivityLog).filter_by(action="Added new stock").count() == 1

    def test_quantity_must_be_positive(self, make_stock):
        with pytest.raises(ValidationError, match="Quantity must be greater than 0"):
            make_stock(0)

    def test_price_must_be_positive(self, make_stock):
        with pytest.raises(ValidationError, match="Price must be greater than 0"):
            make_stock(5, unit_price_cents=0)

    def test_expiry_must_follow_date_added(self, db_session, admin, product, supplier):
        with pytest.raises(ValidationError, match="Expiry date must be later than the added date"):
            inventory_service.add_stock(
                actor=admin,
                product_id=product.id,
                supplier_id=supplier.id,
                quantity=5,
                unit_price_cents=900,
                date_added=date(2026, 3, 1),
                expiry_date=date(2026, 3, 1),
            )
        assert db_session.query(Stock).count() == 0

    def test_unknown_supplier(self, db_session, admin, product):
        with pytest.raises(NotFoundError):
            inventory_service.add_stock(
                actor=admin,
                product_id=product.id,
                supplier_id=999,
                quantity=5,
                unit_price_cents=900,
                date_added="2026-03-01",
                expiry_date="2027-03-01",
            )

    def test_staff_cannot_receive_stock(self, db_session, staff, product, supplier):
        with pytest.raises(PermissionDeniedError):
            inventory_service.add_stock(
                actor=staff,
                product_id=product.id,
                supplier_id=supplier.id,
                quantity=5,
                unit_price_cents=900,
                date_added="2026-03-01",
                expiry_date="2027-03-01",
            )

    def test_earliest_lot_is_used(self, make_stock, product):
        first = make_stock(3)
        make_stock(50)
        assert inventory_service.get_stock_for_product(product.id).id == first.id


class TestDecrement:

    def test_decrement(self, db_session, stock):
        inventory_service.decrement_stock(stock.id, 4)
        db_session.commit()
        assert db_session.get(Stock, stock.id).quantity == 6

    def test_decrement_to_zero(self, db_session, stock):
        inventory_service.decrement_stock(stock.id, 10)
        db_session.commit()
        assert db_session.get(Stock, stock.id).quantity == 0

    def test_decrement_beyond_quantity_fails(self, db_session, stock):
        with pytest.raises(InsufficientStockError):
            inventory_service.decrement_stock(stock.id, 11)
        db_session.rollback()
        assert db_session.get(Stock, stock.id).quantity == 10


class TestTransactions:

    def test_post_transaction(self, db_session, staff, stock, product):
        txn = sales_service.post_transaction(
            actor=staff, product_id=product.id, quantity=3, unit_price_cents=1800,
        )

        assert txn.total_price_cents == 5400
        assert txn.created_by_username == "clerk"
        assert txn.stock_id == stock.id
        assert db_session.get(Stock, stock.id).quantity == 7

        entry = db_session.query(ActivityLog).filter_by(action="New transaction").one()
        assert entry.user_id == staff.id

    def test_quantity_exceeding_stock_fails_and_stock_unchanged(self, db_session, staff, make_stock, product):
        lot = make_stock(5)

        with pytest.raises(InsufficientStockError):
            sales_service.post_transaction(
                actor=staff, product_id=product.id, quantity=6, unit_price_cents=1500,
            )

        assert db_session.get(Stock, lot.id).quantity == 5
        assert db_session.query(Transaction).count() == 0
        assert db_session.query(ActivityLog).filter_by(action="New transaction").count() == 0

    def test_product_without_stock(self, db_session, staff, product):
        with pytest.raises(NotFoundError, match="no stock"):
            sales_service.post_transaction(
                actor=staff, product_id=product.id, quantity=1, unit_price_cents=1500,
            )

    @pytest.mark.parametrize("quantity", [0, -2, "1.5", 2.0])
    def test_invalid_quantity(self, db_session, staff, stock, product, quantity):
        with pytest.raises(ValidationError):
            sales_service.post_transaction(
                actor=staff, product_id=product.id, quantity=quantity, unit_price_cents=1500,
            )
        assert db_session.get(Stock, stock.id).quantity == 10

    def test_today_transactions(self, db_session, staff, stock, product):
        sales_service.post_transaction(actor=staff, product_id=product.id, quantity=1, unit_price_cents=1000)
        sales_service.post_transaction(actor=staff, product_id=product.id, quantity=2, unit_price_cents=1000)

        today = sales_service.today_transactions()
        assert len(today) == 2
        assert sum(t.total_price_cents for t in today) == 3000
