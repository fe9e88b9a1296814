from app.utils.money import format_inr, parse_price_to_int

def test_parse_price():
    assert parse_price_to_int("₹49,990") == 49990
    assert parse_price_to_int("63,989.00") == 63989
    assert parse_price_to_int("N/A") is None
    assert parse_price_to_int("") is None

def test_format_inr_indian_grouping():
    assert format_inr(999) == "₹999"
    assert format_inr(1000) == "₹1,000"
    assert format_inr(123456) == "₹1,23,456"
    assert format_inr(12345678) == "₹1,23,45,678"

def test_format_inr_fractions():
    assert format_inr(49999.5) == "₹49,999.5"
    assert format_inr(55990.0) == "₹55,990"
