import argparse
import json
import logging
import sys

import sentry_sdk
from pydantic import TypeAdapter

from tripsplit import config
from tripsplit.balances import compute_balances
from tripsplit.currency import RateTableError, active_rates, convert_currency, exchange_rate, format_amount
from tripsplit.loader import TripLoadError, load_trip
from tripsplit.logging_config import LOG_LEVELS, setup_logging
from tripsplit.models import Trip
from tripsplit.reports import budget_progress, person_balance, trip_summary
from tripsplit.schemas import BudgetProgress, Settlement
from tripsplit.settlement import TOLERANCE, compute_settlements

logger = logging.getLogger("tripsplit")


def _name(trip: Trip, person_id: str) -> str:
    person = trip.person(person_id)
    return person.name if person else person_id


def _dump(adapter_type, value) -> str:
    return TypeAdapter(adapter_type).dump_json(value, by_alias=True, indent=2).decode()


def cmd_balances(args, out) -> None:
    trip = load_trip(args.file, args.trip)
    balances = compute_balances(trip)
    if args.json:
        print(json.dumps(balances, indent=2), file=out)
        return

    for person_id, balance in sorted(balances.items(), key=lambda kv: -kv[1]):
        if balance > TOLERANCE:
            status = f"is owed {format_amount(balance, trip.currency)}"
        elif balance < -TOLERANCE:
            status = f"owes {format_amount(-balance, trip.currency)}"
        else:
            status = "settled"
        print(f"{_name(trip, person_id)}: {status}", file=out)


def cmd_settle(args, out) -> None:
    trip = load_trip(args.file, args.trip)
    settlements = compute_settlements(trip)
    if args.json:
        print(_dump(list[Settlement], settlements), file=out)
        return

    if not settlements:
        print("Everyone is settled up.", file=out)
        return
    for s in settlements:
        print(
            f"{_name(trip, s.from_person)} -> {_name(trip, s.to)}: "
            f"{format_amount(s.amount, trip.currency)}",
            file=out,
        )


def cmd_person(args, out) -> None:
    trip = load_trip(args.file, args.trip)
    pb = person_balance(trip, args.person_id)
    if args.json:
        print(pb.model_dump_json(by_alias=True, indent=2), file=out)
        return

    print(_name(trip, args.person_id), file=out)
    print(f"  paid:    {format_amount(pb.paid, trip.currency)}", file=out)
    print(f"  owed:    {format_amount(pb.owed, trip.currency)}", file=out)
    print(f"  balance: {format_amount(pb.balance, trip.currency)}", file=out)


def cmd_summary(args, out) -> None:
    trip = load_trip(args.file, args.trip)
    summary = trip_summary(trip)
    if args.json:
        print(summary.model_dump_json(by_alias=True, indent=2), file=out)
        return

    print(f"{trip.name or trip.id}: {summary.expense_count} expenses, "
          f"{format_amount(summary.total_expenses, trip.currency)} total, "
          f"{format_amount(summary.average_per_person, trip.currency)} per person", file=out)
    for category, total in summary.category_totals.items():
        print(f"  {category}: {format_amount(total, trip.currency)}", file=out)
    for row in summary.people:
        print(f"  {row.name}: paid {format_amount(row.paid, trip.currency)}, "
              f"owed {format_amount(row.owed, trip.currency)}", file=out)


def cmd_budget(args, out) -> None:
    trip = load_trip(args.file, args.trip)
    rows = budget_progress(trip)
    if args.json:
        print(_dump(list[BudgetProgress], rows), file=out)
        return

    if not rows:
        print("No budget set.", file=out)
        return
    for row in rows:
        flag = " OVER BUDGET" if row.over_budget else (" warning" if row.warning else "")
        print(f"{row.category or 'total'}: {format_amount(row.spent, trip.currency)} / "
              f"{format_amount(row.budget, trip.currency)} ({row.percentage:.0f}%){flag}", file=out)


def cmd_convert(args, out) -> None:
    rates = active_rates()
    source = args.from_currency.upper()
    target = args.to_currency.upper()
    converted = convert_currency(args.amount, source, target, rates)
    if args.json:
        print(json.dumps({
            "amount": converted,
            "currency": target,
            "rate": exchange_rate(source, target, rates),
        }), file=out)
        return
    print(f"{format_amount(args.amount, source)} = {format_amount(converted, target)}", file=out)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="print machine-readable JSON")

    trip_file = argparse.ArgumentParser(add_help=False, parents=[common])
    trip_file.add_argument("file", help="trip JSON export (one trip or a list of trips)")
    trip_file.add_argument("--trip", help="trip id, required when the file holds several trips")

    parser = argparse.ArgumentParser(
        prog="tripsplit",
        description="Work out who owes whom for a trip's shared expenses.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="overrides LOG_LEVEL",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("balances", parents=[trip_file], help="net balance per person") \
        .set_defaults(func=cmd_balances)
    sub.add_parser("settle", parents=[trip_file], help="transfers that settle every debt") \
        .set_defaults(func=cmd_settle)

    person = sub.add_parser("person", parents=[trip_file], help="paid/owed/balance for one person")
    person.add_argument("person_id")
    person.set_defaults(func=cmd_person)

    sub.add_parser("summary", parents=[trip_file], help="totals by category and person") \
        .set_defaults(func=cmd_summary)
    sub.add_parser("budget", parents=[trip_file], help="spending against the trip budget") \
        .set_defaults(func=cmd_budget)

    convert = sub.add_parser("convert", parents=[common], help="convert an amount between currencies")
    convert.add_argument("amount", type=float)
    convert.add_argument("from_currency")
    convert.add_argument("to_currency")
    convert.set_defaults(func=cmd_convert)

    return parser


def main(argv=None, out=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    if config.SENTRY_DSN:
        sentry_sdk.init(
            dsn=config.SENTRY_DSN,
            traces_sample_rate=0.0,
            send_default_pii=False,
        )

    try:
        args.func(args, out or sys.stdout)
    except (TripLoadError, RateTableError) as exc:
        logger.warning(str(exc), extra={"extra_data": {"command": args.command}})
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
