"""
Export formatter -- fixed-column CSV text for three record kinds.

Responsibility:
    Turn an ordered sequence of transactions, egg sales or feed purchases
    into delimited text: a plain header row, then one line per record with
    every field double-quoted.

Invariants enforced:
    - No aggregation, filtering or sorting; output order is input order.
    - Same input always yields byte-identical output.
    - Records are newline-separated with no trailing newline.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TypeVar

from poultry_kernel.domain.records import EggSale, FeedPurchase, Transaction

T = TypeVar("T")

TRANSACTION_HEADERS = (
    "Date", "Type", "Amount", "Source", "Linked Company", "Description", "Category",
)
EGG_SALE_HEADERS = ("Date", "Peti Count", "Price per Peti", "Total Amount", "Buyer Name")
FEED_PURCHASE_HEADERS = ("Date", "Feed Type", "Bags", "Cost per Bag", "Total Cost")


def format_value(value: object) -> str:
    """Render one field.  Whole numbers print without a fraction."""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return str(int(value))
        return format(value.normalize(), "f")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _format_table(
    headers: Sequence[str],
    records: Iterable[T],
    row: Callable[[T], Sequence[object]],
) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in records:
        writer.writerow([format_value(v) for v in row(record)])
    lines = [",".join(headers)]
    body = buffer.getvalue()
    if body:
        lines.append(body[:-1])
    return "\n".join(lines)


def export_transactions(transactions: Iterable[Transaction]) -> str:
    return _format_table(
        TRANSACTION_HEADERS,
        transactions,
        lambda t: (
            t.transaction_date,
            t.type,
            t.amount,
            t.source,
            t.linked_company,
            t.description,
            t.category,
        ),
    )


def export_egg_sales(sales: Iterable[EggSale]) -> str:
    return _format_table(
        EGG_SALE_HEADERS,
        sales,
        lambda s: (s.sale_date, s.peti_count, s.price_per_peti, s.total_amount, s.buyer_name),
    )


def export_feed_purchases(purchases: Iterable[FeedPurchase]) -> str:
    return _format_table(
        FEED_PURCHASE_HEADERS,
        purchases,
        lambda p: (p.purchase_date, p.feed_type, p.bags, p.cost_per_bag, p.total_cost),
    )


EXPORTERS: dict[str, Callable[..., str]] = {
    "transactions": export_transactions,
    "egg-sales": export_egg_sales,
    "feed-purchases": export_feed_purchases,
}
