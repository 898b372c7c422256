"""
Generation of the Webflow → Sanity id map CSV.

The :func:`generate_id_map_csv` helper writes one row per migrated item
with its original Webflow id and slug next to the Sanity document id, so
the source ids can still be referenced after the migration.
"""

from __future__ import annotations

import csv
import os
from typing import Dict, Iterable


def generate_id_map_csv(rows: Iterable[Dict[str, str]], *, out_path: str = "reports/id_map.csv") -> str:
    """Write the id map CSV.

    Parameters
    ----------
    rows:
        Iterable of dictionaries with ``WebflowId``, ``Slug``, ``SanityId``
        and ``Status`` keys. Missing keys are written as empty cells.
    out_path:
        Location of the CSV file to be written. The parent directory is
        created automatically.

    Returns
    -------
    str
        The path of the generated CSV file.
    """
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["WebflowId", "Slug", "SanityId", "Status"])
        for row in rows:
            writer.writerow([
                row.get("WebflowId", ""),
                row.get("Slug") or "",
                row.get("SanityId", ""),
                row.get("Status") or "",
            ])
    return out_path
