import logging
import operator
from functools import reduce
from typing import Iterable, Mapping

import pandas as pd

from branch_sales.formatting import Collator
from branch_sales.schemas import AggregatedProduct, BranchDataset

logger = logging.getLogger(__name__)

DatasetsInput = Mapping[str, BranchDataset | dict | None] | Iterable[BranchDataset | dict | None]


def _as_datasets(datasets: DatasetsInput) -> list[BranchDataset | None]:
    if isinstance(datasets, Mapping):
        datasets = datasets.values()
    return [
        BranchDataset.model_validate(d) if isinstance(d, dict) else d
        for d in datasets
    ]


def line_revenues(datasets: DatasetsInput) -> pd.DataFrame:
    """
    Flattens every branch into one frame of `name`, `revenue` lines.
    Absent branches and branches without products contribute no rows.
    """
    rows = []
    for dataset in _as_datasets(datasets):
        if dataset is None:
            continue
        for product in dataset.products:
            rows.append(
                {
                    "name": product.name,
                    "unit_price": product.unit_price,
                    "sold": product.sold,
                }
            )

    df = pd.DataFrame(rows, columns=["name", "unit_price", "sold"])
    # Float multiplication: integer columns would wrap around on overflow.
    # Non-numeric values become NaN and propagate into the revenue.
    unit_price = pd.to_numeric(df["unit_price"], errors="coerce").astype(float)
    sold = pd.to_numeric(df["sold"], errors="coerce").astype(float)
    df["revenue"] = unit_price * sold
    return df[["name", "revenue"]]


def aggregate(datasets: DatasetsInput) -> list[AggregatedProduct]:
    """
    Sums line revenue per exact (case-sensitive) product name across all branches.
    Output follows first-seen order; sorting happens later.
    """
    lines = line_revenues(datasets)
    if lines.empty:
        logger.info("No product lines to aggregate.")
        return []

    # Sequential left-to-right addition per name.
    totals = lines.groupby("name", sort=False, dropna=False)["revenue"].agg(
        lambda s: reduce(operator.add, s.tolist(), 0.0)
    )
    logger.info(f"Aggregated {len(lines)} product lines into {len(totals)} products.")
    return [
        AggregatedProduct(
            name=None if pd.isna(name) else name, revenue=float(revenue)
        )
        for name, revenue in totals.items()
    ]


def filter_products(
    products: Iterable[AggregatedProduct], query: str
) -> list[AggregatedProduct]:
    """Keeps products whose name contains the query, ignoring case."""
    needle = (query or "").lower()
    return [p for p in products if needle in (p.name or "").lower()]


def sort_products(
    products: Iterable[AggregatedProduct], collator: Collator
) -> list[AggregatedProduct]:
    # sorted() is stable, so equal names keep their incoming order.
    return sorted(products, key=lambda p: collator.sort_key(p.name or ""))


def total_revenue(products: Iterable[AggregatedProduct]) -> float:
    total = 0
    for product in products:
        total += product.revenue
    return total
