"""SummaryReport model and Markdown/JSON rendering."""

from __future__ import annotations

import json
from datetime import date
from typing import Any

from switchbox.summary.aggregation import SkuSummaryRow, grand_total


class SummaryReport:
    """Cost summary for a project."""

    def __init__(
        self,
        client_name: str = "",
        rows: list[SkuSummaryRow] | None = None,
        currency: str = "ILS",
        issued: date | None = None,
    ) -> None:
        self.client_name = client_name
        self.rows = rows or []
        self.currency = currency
        self.issued = issued or date.today()

    @property
    def grand_total(self) -> float:
        return grand_total(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def format_price(self, amount: float) -> str:
        return f"{amount:,.2f} {self.currency}"

    def to_markdown(self) -> str:
        """Generate a quote summary in Markdown."""
        lines: list[str] = []

        lines.append("# Project Quote Summary")
        lines.append("")
        lines.append(f"**Client:** {self.client_name or 'Unknown'}")
        lines.append(f"**Date:** {self.issued.isoformat()}")
        lines.append(f"**Total:** {self.format_price(self.grand_total)}")
        lines.append("")

        lines.append("## Summary by SKU")
        lines.append("")
        if self.is_empty:
            lines.append("No products added yet")
            lines.append("")
            return "\n".join(lines)

        lines.append("| SKU | Product Name | Quantity | Unit Price | Total Price |")
        lines.append("|-----|--------------|----------|------------|-------------|")
        for row in self.rows:
            name = f"{row.product_name} *(auto)*" if row.is_frame_or_adapter else row.product_name
            lines.append(
                f"| {row.sku} | {name} | {row.quantity} | "
                f"{self.format_price(row.unit_price)} | {self.format_price(row.total_price)} |"
            )
        lines.append(f"| **Total** | | | | **{self.format_price(self.grand_total)}** |")
        lines.append("")

        return "\n".join(lines)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)

    def to_dict(self) -> dict[str, Any]:
        return {
            "client_name": self.client_name,
            "currency": self.currency,
            "issued": self.issued.isoformat(),
            "rows": [row.model_dump() for row in self.rows],
            "grand_total": self.grand_total,
        }
