"""
Quote Formatter for Studio Estimator

Turns a stored estimate (total + breakdown) into the customer-facing quote
summary: lines grouped by room/category, group subtotals, and a display-only
tax line. The stored total is never changed here.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from api.config import CURRENCY_SYMBOL, TAX_DISPLAY_RATE


@dataclass
class QuoteGroup:
    """Breakdown lines for one room or category."""
    label: str
    lines: List[Dict[str, Any]] = field(default_factory=list)
    subtotal: float = 0.0


@dataclass
class QuoteSummary:
    """Presentation-ready quote."""
    subtotal: float
    tax_rate: float
    tax_amount: float
    grand_total: float
    groups: List[QuoteGroup] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subtotal": self.subtotal,
            "tax_rate": self.tax_rate,
            "tax_amount": self.tax_amount,
            "grand_total": self.grand_total,
            "groups": [
                {"label": g.label, "lines": g.lines, "subtotal": g.subtotal}
                for g in self.groups
            ],
        }


def _group_digits_indian(whole: int) -> str:
    """1234567 -> '12,34,567' (last three digits, then pairs)."""
    digits = str(whole)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


class QuoteFormatter:
    """Builds quote summaries and formats amounts for display."""

    def __init__(self, tax_rate: float = TAX_DISPLAY_RATE, currency_symbol: str = CURRENCY_SYMBOL):
        self.tax_rate = tax_rate
        self.currency_symbol = currency_symbol

    def build_summary(self, total: float, breakdown: List[Dict[str, Any]]) -> QuoteSummary:
        """
        Build a quote summary from a persisted estimate.

        Args:
            total: Stored estimate total (pre-tax)
            breakdown: Stored breakdown lines (dicts with category/item/quantity/unit_price/total)

        Returns:
            QuoteSummary with groups in order of first appearance
        """
        groups: Dict[str, QuoteGroup] = {}
        for line in breakdown:
            label = line.get("category", "Other")
            if label not in groups:
                groups[label] = QuoteGroup(label=label)
            groups[label].lines.append(line)
            groups[label].subtotal += line.get("total", 0) or 0

        subtotal = total or 0
        return QuoteSummary(
            subtotal=subtotal,
            tax_rate=self.tax_rate,
            tax_amount=round(subtotal * self.tax_rate),
            grand_total=round(subtotal * (1 + self.tax_rate)),
            groups=list(groups.values()),
        )

    def format_amount(self, amount: Optional[float], compact: bool = False) -> str:
        """
        Format an amount with Indian digit grouping.

        With ``compact`` set, amounts of one lakh and above render as e.g. '₹1.2L'.
        """
        if amount is None:
            return "-"
        if compact and amount >= 100000:
            return f"{self.currency_symbol}{amount / 100000:.1f}L"

        sign = "-" if amount < 0 else ""
        amount = abs(amount)
        whole = int(amount)
        fraction = round(amount - whole, 2)
        if fraction >= 1:
            whole += 1
            fraction = 0
        text = _group_digits_indian(whole)
        if fraction:
            text += f"{fraction:.2f}"[1:].rstrip("0")
        return f"{sign}{self.currency_symbol}{text}"
