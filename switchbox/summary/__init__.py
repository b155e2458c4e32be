"""Cost summary: per-SKU aggregation, report rendering, CSV export."""

from switchbox.summary.aggregation import (
    SkuSummaryRow,
    build_sku_summary,
    generate_sku_summary,
    grand_total,
)
from switchbox.summary.csv_export import export_csv, write_csv
from switchbox.summary.report import SummaryReport

__all__ = [
    "SkuSummaryRow",
    "SummaryReport",
    "build_sku_summary",
    "export_csv",
    "generate_sku_summary",
    "grand_total",
    "write_csv",
]
