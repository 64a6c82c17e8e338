"""Dashboard statistics tests."""

from winehouse.services import reporting_service, sales_service, timekeeping_service


def test_empty_dashboard(db_session, admin):
    stats = reporting_service.dashboard_stats()
    assert stats == {
        "total_products": 0,
        "total_stock": 0,
        "low_stock_items": 0,
        "total_sales_today": 0,
        "total_sales_amount_cents": 0,
        "active_staff": 0,
        "total_staff": 0,
    }


def test_dashboard_counts(db_session, admin, staff, other_staff, product, make_stock):
    make_stock(30)
    make_stock(4)
    sales_service.post_transaction(actor=staff, product_id=product.id, quantity=25, unit_price_cents=1200)
    timekeeping_service.clock_in(staff)

    stats = reporting_service.dashboard_stats()

    assert stats["total_products"] == 1
    assert stats["total_stock"] == 9
    # Both lots are now below the threshold of 10
    assert stats["low_stock_items"] == 2
    assert stats["total_sales_today"] == 1
    assert stats["total_sales_amount_cents"] == 30000
    assert stats["active_staff"] == 1
    assert stats["total_staff"] == 2


def test_low_stock_threshold_is_configurable(app, db_session, make_stock):
    make_stock(12)
    app.config["LOW_STOCK_THRESHOLD"] = 20
    try:
        assert len(reporting_service.low_stock_lots()) == 1
    finally:
        app.config["LOW_STOCK_THRESHOLD"] = 10
    assert reporting_service.low_stock_lots() == []


def test_today_transactions(db_session, staff, product, stock):
    sales_service.post_transaction(actor=staff, product_id=product.id, quantity=1, unit_price_cents=1000)
    assert len(reporting_service.today_transactions()) == 1
