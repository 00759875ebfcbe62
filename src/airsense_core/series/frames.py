from __future__ import annotations

from typing import Sequence

import pandas as pd

from airsense_core.report.table_builder import ReportRow
from airsense_core.series.align import (
    LOWER_SUFFIX,
    TIMESTAMP_KEY,
    UPPER_SUFFIX,
    AlignedRow,
    aligned_entities,
)

REPORT_COLUMNS = [
    "entity",
    "label",
    "forecast",
    "lowerBound",
    "upperBound",
    "deviation",
    "deviationLabel",
]


def aligned_frame(
    rows: Sequence[AlignedRow],
    entities: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Wide chart frame; entities missing at a timestamp become NaN cells.

    ``entities`` fixes the column order; it defaults to the names found in the rows.
    """
    if not rows:
        return pd.DataFrame(columns=[TIMESTAMP_KEY])
    columns = [TIMESTAMP_KEY]
    for entity in entities if entities is not None else aligned_entities(rows):
        if entity in columns or not any(entity in row for row in rows):
            continue
        columns.append(entity)
        for key in (f"{entity}{LOWER_SUFFIX}", f"{entity}{UPPER_SUFFIX}"):
            if key not in columns and any(key in row for row in rows):
                columns.append(key)
    return pd.DataFrame.from_records(list(rows), columns=columns)


def report_frame(reports: dict[str, list[ReportRow]]) -> pd.DataFrame:
    records = [
        {"entity": entity, **row.to_dict()}
        for entity, entity_rows in reports.items()
        for row in entity_rows
    ]
    return pd.DataFrame.from_records(records, columns=REPORT_COLUMNS)
