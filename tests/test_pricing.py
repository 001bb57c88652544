from storefront.modules.cart.pricing import (
    SHIPPING_FLAT_CENTS,
    discount_percent,
    format_money,
    summarize,
    tax_cents,
    unit_price_cents,
)


def test_sale_price_wins_over_list_price():
    assert unit_price_cents(1000) == 1000
    assert unit_price_cents(500, 300) == 300
    assert unit_price_cents(500, 0) == 0


def test_cart_summary_example():
    # (10.00 x 2) + (5.00 on sale for 3.00 x 1)
    s = summarize([(unit_price_cents(1000), 2), (unit_price_cents(500, 300), 1)])

    assert s.item_count == 3
    assert s.subtotal_cents == 2300
    assert s.shipping_cents == SHIPPING_FLAT_CENTS == 1500
    assert s.tax_cents == 184
    assert s.total_cents == 3984
    assert s.to_dict()["total"] == "39.84"


def test_empty_cart_has_no_shipping():
    s = summarize([])
    assert s.subtotal_cents == 0
    assert s.shipping_cents == 0
    assert s.tax_cents == 0
    assert s.total_cents == 0


def test_tax_rounds_to_the_nearest_cent():
    # 8% of 0.50 is exactly 4 cents; 8% of 0.06 is 0.48 cents -> 0; 8% of 0.19 is 1.52 -> 2
    assert tax_cents(50) == 4
    assert tax_cents(6) == 0
    assert tax_cents(19) == 2


def test_discount_percent():
    assert discount_percent(500, 300) == 40
    assert discount_percent(300, 200) == 33
    assert discount_percent(800, 700) == 13  # 12.5 rounds half-up
    assert discount_percent(1000) == 0
    assert discount_percent(0, 0) == 0


def test_format_money():
    assert format_money(0) == "0.00"
    assert format_money(5) == "0.05"
    assert format_money(123456) == "1234.56"
