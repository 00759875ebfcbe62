from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pandas as pd

TABLE_WRITERS: dict[str, Callable[[pd.DataFrame, Path], None]] = {
    "csv": lambda df, path: df.to_csv(path, index=False),
    "parquet": lambda df, path: df.to_parquet(path, index=False),
}
TABLE_SUFFIXES = {".csv": "csv", ".parquet": "parquet"}


def table_format_for(path: Path, default: str = "csv") -> str:
    return TABLE_SUFFIXES.get(path.suffix.lower(), default)


def write_table(
    df: pd.DataFrame,
    path: Path,
    fmt: str | None = None,
    *,
    default_fmt: str = "csv",
) -> Path:
    """Write a table; without ``fmt`` the format follows the file suffix."""
    resolved_fmt = fmt or table_format_for(path, default_fmt)
    writer = TABLE_WRITERS.get(resolved_fmt)
    if writer is None:
        raise ValueError(f"Unsupported table format: {resolved_fmt}")
    path.parent.mkdir(parents=True, exist_ok=True)
    writer(df, path)
    return path


def write_summary(data: dict[str, Any], path: Path) -> Path:
    """JSON sidecar with sorted keys; unit symbols such as µ are kept unescaped."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
    path.write_text(payload + "\n", encoding="utf-8")
    return path
