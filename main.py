import argparse
from datetime import date, datetime

from stock_analytics import settings, utils
from stock_analytics.logger import setup_logger
from stock_analytics.pipelines.report import StockReportPipeline


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stock consumption and loss report.")
    parser.add_argument(
        "preset",
        nargs="?",
        default="today",
        choices=settings.DATE_RANGE_PRESETS,
        help="Report period (default: today).",
    )
    parser.add_argument("--start", type=date.fromisoformat, help="Custom range start (YYYY-MM-DD).")
    parser.add_argument("--end", type=date.fromisoformat, help="Custom range end (YYYY-MM-DD).")
    parser.add_argument(
        "--window",
        type=int,
        default=settings.USAGE_WINDOW_DAYS,
        help="Trailing window in days for usage rates.",
    )
    parser.add_argument("--test", action="store_true", help="Compute only; write no files.")
    return parser.parse_args(argv)


def run_process(argv=None):
    """Main orchestration function to run the stock report."""
    # Configure the package logger so every module's logger inherits the handlers
    setup_logger("stock_analytics")
    args = parse_args(argv)

    # The only place the system clock is read; everything downstream gets `now`
    now = datetime.now()
    date_range = utils.resolve_date_range(args.preset, now, args.start, args.end)

    pipeline = StockReportPipeline(
        now=now,
        date_range=date_range,
        window_days=args.window,
        test_mode=args.test,
    )
    return pipeline.run()


if __name__ == "__main__":
    run_process()
