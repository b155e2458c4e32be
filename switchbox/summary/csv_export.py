"""CSV export of a project: summary by SKU, box contents, parts, extras.

All sections share one ``csv.writer``; fields holding commas, quotes or
newlines are quoted by it.  Prices are written with two decimals.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from pathlib import Path

from switchbox.config import DEFAULT_CSV_NAME
from switchbox.models.box import Box, FrameAdapter, Project
from switchbox.summary.aggregation import SkuSummaryRow, grand_total

logger = logging.getLogger(__name__)


def _box_products(box: Box) -> str:
    parts = []
    for line in box.products:
        size = line.product.attributes.module_size or 0
        plural = "s" if size > 1 else ""
        parts.append(f"{line.sku} ({line.quantity}x, {size} module{plural})")
    return "; ".join(parts)


def export_csv(
    project: Project,
    rows: list[SkuSummaryRow],
    parts: list[FrameAdapter],
) -> str:
    """Render the project as CSV text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([f"Client: {project.client_name}"])
    writer.writerow([])

    writer.writerow(["Summary by SKU"])
    writer.writerow(["SKU", "Product Name", "Quantity", "Unit Price", "Total Price"])
    for row in rows:
        writer.writerow([
            row.sku, row.product_name, row.quantity,
            f"{row.unit_price:.2f}", f"{row.total_price:.2f}",
        ])
    writer.writerow(["", "", "", "", f"{grand_total(rows):.2f}"])
    writer.writerow([])

    writer.writerow(["Box Contents"])
    writer.writerow(["Box Name", "Area", "Description", "Color", "Products"])
    for box in project.boxes:
        writer.writerow([
            box.name, box.area, box.description,
            box.color_constraint or "None", _box_products(box),
        ])

    if parts:
        writer.writerow([])
        writer.writerow(["Frames and Adapters"])
        writer.writerow(["Type", "SKU", "Name", "For Box", "Module Capacity", "Color"])
        for part in parts:
            writer.writerow([
                part.type, part.sku, part.name,
                part.for_box_type.value, part.module_capacity, part.color or "None",
            ])

    if project.complementary_products:
        writer.writerow([])
        writer.writerow(["Complementary Products"])
        writer.writerow(["SKU", "Product Name", "Quantity", "Area", "Description"])
        for item in project.complementary_products:
            writer.writerow([item.sku, item.name, item.quantity, item.area, item.description or ""])

    return buf.getvalue()


def default_filename(client_name: str) -> str:
    """``<client>_summary.csv``, with path separators stripped from the name."""
    base = re.sub(r"[\\/:*?\"<>|]+", "_", client_name.strip()) or DEFAULT_CSV_NAME
    return f"{base}_summary.csv"


def write_csv(
    project: Project,
    rows: list[SkuSummaryRow],
    parts: list[FrameAdapter],
    path: str | Path,
) -> Path:
    """Write the CSV export to *path* (a directory gets the default file name)."""
    p = Path(path)
    if p.is_dir():
        p = p / default_filename(project.client_name)
    p.write_text(export_csv(project, rows, parts), encoding="utf-8")
    logger.info("Exported %d summary rows to %s", len(rows), p)
    return p
