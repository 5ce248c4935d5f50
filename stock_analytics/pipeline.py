import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

from stock_analytics import data_handler, settings

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for report pipelines.
    Follows an Extract -> Transform -> Load (ETL) pattern.
    """

    def __init__(self, report_type: str, sources: list[str], test_mode: bool = False):
        self.report_type = report_type
        self.sources = sources
        self.test_mode = test_mode
        # Status summary tracks the export date for each source
        self.status_summary: dict[str, Optional[date]] = {src: None for src in sources}
        self.result: Any = None

    def run(self) -> Any:
        """
        Orchestrates the pipeline execution. Returns the transformed result,
        or None when a step had nothing to work with.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if not raw_data:
            logger.warning(f"⚠️ No data extracted for {self.report_type}.")
            self.print_status_summary()
            return None

        # --- 2. TRANSFORM ---
        self.result = self.transform(raw_data)
        if self.result is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(self.result)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return self.result

    @abstractmethod
    def extract(self) -> dict[str, Any] | None:
        """
        Finds and loads the input exports, keyed by source name.
        Should also populate self.status_summary as it processes sources.
        """

    @abstractmethod
    def transform(self, raw_data: dict[str, Any]) -> Any:
        """Validates the inputs and computes the report. Returns None on failure."""

    def print_status_summary(self) -> None:
        if not self.sources:
            return
        logger.info("\n--- Source Status Summary ---")
        for src in self.sources:
            date_val = self.status_summary.get(src)
            logger.info(f"{src}: {date_val.isoformat() if date_val else 'No data'}")

    def load(self, result: Any) -> None:
        """Saves the report to disk unless running in test mode."""
        self.print_status_summary()

        if self.test_mode:
            logger.info("🧪 Test Mode: Skipping file output.")
            return

        data_handler.save_outputs(result, settings.REPORT_FILENAME_BASE)
