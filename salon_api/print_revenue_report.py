"""Print a revenue report for the stored appointments as JSON.

Usage:
    python -m salon_api.print_revenue_report monthly 2024-02-01
"""
import sys

from salon_api.scheduling.aggregation import Granularity, summarize_revenue
from salon_api.scheduling.dates import format_date_str, parse_date_str, today
from salon_api.scheduling.errors import PersistenceError
from salon_api.storage.sql_gateway import SqlAppointmentGateway

USAGE = "Usage: python -m salon_api.print_revenue_report [daily|weekly|monthly|yearly] [YYYY-MM-DD]"


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 2:
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    try:
        granularity = Granularity(args[0]) if args else Granularity.MONTHLY
        reference = parse_date_str(args[1]) if len(args) > 1 else today()
    except ValueError as exc:
        print(f"{exc}\n{USAGE}", file=sys.stderr)
        sys.exit(2)

    try:
        records = SqlAppointmentGateway().fetch_all()
    except PersistenceError as exc:
        print("Could not load appointments:", exc, file=sys.stderr)
        sys.exit(1)

    report = summarize_revenue(records, granularity, format_date_str(reference))
    print(report.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
