import json
import logging
from pathlib import Path

import pandas as pd
from pydantic import BaseModel

from stock_analytics import settings, utils
from stock_analytics.schemas import StockReport

logger = logging.getLogger(__name__)


def _to_frame(rows: list[BaseModel]) -> pd.DataFrame:
    return pd.DataFrame([row.model_dump(mode="json") for row in rows])


def _write_csv(rows: list[BaseModel], path: Path) -> None:
    if not rows:
        logger.info(f"INFO: Nothing to write for {path.name}.")
        return
    df = _to_frame(rows)
    # Display the no-projection case the way the dashboards do
    if "days_left" in df.columns:
        df["days_left"] = df["days_left"].map(
            lambda v: utils.format_days_left(None if pd.isna(v) else v)
        )
    df.to_csv(path, index=False)
    logger.info(f"✅ Saved: {path}")


def save_outputs(report: StockReport, base_name: str = settings.REPORT_FILENAME_BASE) -> dict[str, Path]:
    """
    Saves the report tables to dated CSVs and, when enabled, the whole
    report to JSON. Returns the paths keyed by table name.
    """
    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename(report.generated_at)

    tables = {
        "truth_table": report.truth_table.rows,
        "restock": report.restock_plan.suggestions,
        "low_stock": report.low_stock.entries,
        "movements": report.movements,
    }

    paths = {}
    for table_name, rows in tables.items():
        path = settings.OUTPUT_DIR / f"{base_name}_{table_name}_{date_suffix}.csv"
        _write_csv(rows, path)
        if rows:
            paths[table_name] = path

    if settings.SAVE_JSON_OUTPUT:
        json_path = settings.OUTPUT_DIR / f"{base_name}_{date_suffix}.json"
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(report.model_dump(mode="json"), f, indent=2, default=str)
        logger.info(f"✅ JSON output saved to: {json_path}")
        paths["json"] = json_path
    else:
        logger.info("INFO: Skipping JSON file save as per configuration.")

    return paths
