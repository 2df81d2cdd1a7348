from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from expense_client.formatting import format_currency
from expense_client.schemas.category import DEFAULT_COLOR
from expense_client.schemas.expense import CategoryTotal, CurrencyTotal, ExpenseSummary
from expense_client.services.conversion import ZERO, to_decimal, to_reference_unit


def _converted(total: CurrencyTotal) -> Decimal:
    return to_reference_unit(
        total.total_amount,
        total.currency.usd_exchange_rate,
        total.currency.rate_direction,
    )


def total_in_reference_unit(totals: list[CurrencyTotal]) -> Decimal:
    """Sum per-currency totals in USD; unparsable entries count as zero."""
    return sum((_converted(t) for t in totals), ZERO)


def category_share(item: CategoryTotal, grand_total: Decimal) -> int:
    """Percentage of ``grand_total`` spent in one category, rounded half up."""
    if grand_total <= 0:
        return 0
    share = total_in_reference_unit(item.by_currency) / grand_total * 100
    return int(share.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_breakdown(item: CategoryTotal) -> str:
    """Per-currency amounts of a category as entered, e.g. ``"USD 100.00, EUR 50.00"``."""
    return ", ".join(
        format_currency(t.total_amount, t.currency.name) for t in item.by_currency
    )


@dataclass
class CurrencyRow:
    name: str
    total_amount: Decimal
    count: int
    reference_amount: Decimal

    @property
    def display(self) -> str:
        return format_currency(self.total_amount, self.name)


@dataclass
class CategoryRow:
    category_id: int | None
    name: str
    color: str
    expense_count: int
    reference_amount: Decimal
    share: int
    breakdown: str


@dataclass
class SummaryView:
    total_count: int = 0
    reference_total: Decimal = ZERO
    currencies: list[CurrencyRow] = field(default_factory=list)
    categories: list[CategoryRow] = field(default_factory=list)

    @property
    def reference_total_display(self) -> str:
        return format_currency(self.reference_total)


def build_summary_view(summary: ExpenseSummary | None) -> SummaryView:
    """Turn the backend summary into rows ready for the dashboard.

    The grand total used for category shares is the sum over categories, so
    shares add up to roughly 100 whenever anything was spent. Every category is
    listed, including ones with no per-currency totals.
    """
    if summary is None:
        return SummaryView()

    currencies = [
        CurrencyRow(
            name=t.currency.name,
            total_amount=to_decimal(t.total_amount) or ZERO,
            count=t.count or 0,
            reference_amount=_converted(t),
        )
        for t in summary.totals_by_currency
    ]

    category_totals = [total_in_reference_unit(c.by_currency) for c in summary.total_by_category]
    grand_total = sum(category_totals, ZERO)
    categories = [
        CategoryRow(
            category_id=item.category.id,
            name=item.category.name,
            color=item.category.color or DEFAULT_COLOR,
            expense_count=item.total_count,
            reference_amount=reference,
            share=category_share(item, grand_total),
            breakdown=format_breakdown(item),
        )
        for item, reference in zip(summary.total_by_category, category_totals)
    ]

    return SummaryView(
        total_count=summary.total_count,
        reference_total=total_in_reference_unit(summary.totals_by_currency),
        currencies=currencies,
        categories=categories,
    )
