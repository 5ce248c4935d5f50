import logging
from datetime import datetime
from typing import Any, Optional

import pandas as pd

from stock_analytics import parsers, settings, utils
from stock_analytics.pipeline import DataPipeline
from stock_analytics.report import build_report
from stock_analytics.schemas import DateRange, StockReport

logger = logging.getLogger(__name__)


class StockReportPipeline(DataPipeline):
    """
    Reads the latest inventory/deductions/wastage exports from INPUT_DIR and
    produces the stock analytics report for one date range.
    """

    def __init__(
        self,
        now: datetime,
        date_range: Optional[DateRange] = None,
        window_days: int = settings.USAGE_WINDOW_DAYS,
        test_mode: bool = False,
    ):
        # Inventory is required; an empty deductions or wastage log is a valid state
        self.PARSER_REGISTRY = [
            {
                "source": "inventory",
                "prefix": settings.INVENTORY_FILENAME_PREFIX,
                "func": parsers.parse_inventory_export,
                "required": True,
            },
            {
                "source": "deductions",
                "prefix": settings.DEDUCTIONS_FILENAME_PREFIX,
                "func": parsers.parse_deductions_export,
                "required": False,
            },
            {
                "source": "wastage",
                "prefix": settings.WASTAGE_FILENAME_PREFIX,
                "func": parsers.parse_wastage_export,
                "required": False,
            },
        ]
        super().__init__(
            "stock",
            sources=[p["source"] for p in self.PARSER_REGISTRY],
            test_mode=test_mode,
        )
        self.now = now
        self.date_range = date_range or utils.resolve_date_range("today", now)
        self.window_days = window_days

    def extract(self) -> dict[str, pd.DataFrame] | None:
        logger.info("--- Loading Storage Exports ---")

        frames = {}
        for parser in self.PARSER_REGISTRY:
            source = parser["source"]
            logger.info(f"\n-- Processing Source: {source} --")

            found_info = utils.find_latest_report(settings.INPUT_DIR, parser["prefix"])
            if not found_info:
                if parser["required"]:
                    logger.error(f"  > ERROR: Required '{source}' export missing.")
                    return None
                logger.info(f"  > INFO: No '{source}' export. Treating as empty.")
                continue

            path, file_date = found_info
            logger.info(f"  > Found: {path.name} (File Date: {file_date})")

            df = utils.load_csv(path)
            if df is None:
                if parser["required"]:
                    return None
                continue

            frames[source] = df
            self.status_summary[source] = file_date

        return frames

    def transform(self, raw_data: dict[str, Any]) -> StockReport | None:
        logger.info("\n--- Validating Exports ---")

        parsed = {}
        for parser in self.PARSER_REGISTRY:
            source = parser["source"]
            df = raw_data.get(source)
            if df is None:
                parsed[source] = []
                continue
            records = parser["func"](df)
            if records is None:
                return None
            parsed[source] = records

        logger.info("\n--- Computing Analytics ---")
        report = build_report(
            parsed["inventory"],
            parsed["deductions"],
            parsed["wastage"],
            now=self.now,
            date_range=self.date_range,
            window_days=self.window_days,
        )

        logger.info(f"  > Restock list: {len(report.restock_plan.suggestions)} items "
                    f"(₹{report.restock_plan.total_restock_cost:,.2f})")
        logger.info(f"  > Low stock: {len(report.low_stock.entries)} items")
        logger.info(f"  > Truth table: {len(report.truth_table.rows)} active items")
        logger.info(f"  > Wastage: ₹{report.wastage.total_wasted:,.2f} "
                    f"({report.wastage.wastage_percent:.1f}% of outgoing value)")
        return report
