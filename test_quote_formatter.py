"""
Quote formatter tests: display tax, grouping and amount formatting.
"""

import pytest

from api.quote_formatter import QuoteFormatter


def _line(category, item, quantity, unit_price):
    return {
        "category": category,
        "item": item,
        "quantity": quantity,
        "unit_price": unit_price,
        "total": quantity * unit_price,
    }


def test_tax_is_display_only():
    formatter = QuoteFormatter(tax_rate=0.18)
    summary = formatter.build_summary(100000, [])
    assert summary.subtotal == 100000
    assert summary.tax_amount == 18000
    assert summary.grand_total == 118000


def test_tax_amounts_are_rounded():
    summary = QuoteFormatter(tax_rate=0.18).build_summary(999, [])
    assert summary.tax_amount == 180
    assert summary.grand_total == 1179


def test_groups_keep_first_appearance_order():
    breakdown = [
        _line("Living Area", "TV Unit", 1, 150),
        _line("Bedroom 1", "Bed", 1, 300),
        _line("Living Area", "Sofa", 2, 100),
        _line("Bedroom 2", "Bed", 1, 300),
    ]
    summary = QuoteFormatter().build_summary(1050, breakdown)
    assert [(g.label, g.subtotal, len(g.lines)) for g in summary.groups] == [
        ("Living Area", 350, 2),
        ("Bedroom 1", 300, 1),
        ("Bedroom 2", 300, 1),
    ]


def test_summary_to_dict():
    data = QuoteFormatter(tax_rate=0.1).build_summary(200, [_line("Kitchen", "Chimney", 1, 200)])
    assert data.to_dict()["groups"][0]["label"] == "Kitchen"
    assert data.to_dict()["grand_total"] == 220


@pytest.mark.parametrize("amount,expected", [
    (0, "₹0"),
    (999, "₹999"),
    (1000, "₹1,000"),
    (123456, "₹1,23,456"),
    (12345678, "₹1,23,45,678"),
    (1500.5, "₹1,500.5"),
    (None, "-"),
])
def test_format_amount(amount, expected):
    assert QuoteFormatter(currency_symbol="₹").format_amount(amount) == expected


def test_format_amount_compact_lakhs():
    formatter = QuoteFormatter(currency_symbol="₹")
    assert formatter.format_amount(250000, compact=True) == "₹2.5L"
    assert formatter.format_amount(99999, compact=True) == "₹99,999"
