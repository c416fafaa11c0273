"""Utility entrypoints for SportTrack.

Read-only inspection of the stored collections, for support and debugging.
"""

from __future__ import annotations
from tracking import t

import argparse
from dataclasses import replace
from typing import List, Optional

from clubapp.container import AppDependencies, build_dependencies
from infrastructure.settings import AppSettings, get_settings
from logging_config import LOG_DIR, setup_logging
from reservations.availability import available_stock_by_item


def _resolve_settings(data_dir: Optional[str]) -> AppSettings:
    t('scripts.tools._resolve_settings')
    settings = get_settings()
    if data_dir is not None:
        settings = replace(settings, data_directory=data_dir)
    return settings


def list_items(deps: AppDependencies) -> None:
    t('scripts.tools.list_items')
    items = deps.inventory.list_items()
    if not items:
        print("Inventory is empty.")
        return
    for item in items:
        print(f"{item.id}: {item.name} x{item.quantity} [{item.category or '-'}]")


def list_reservations(deps: AppDependencies) -> None:
    t('scripts.tools.list_reservations')
    reservations = deps.reservations.list_reservations()
    if not reservations:
        print("No reservations.")
        return
    for reservation in reservations:
        booked = ", ".join(f"{entry.item_name or entry.item_id} x{entry.quantity}" for entry in reservation.items)
        print(
            f"{reservation.id}: {reservation.coach_name} {reservation.date} "
            f"{reservation.start_time}-{reservation.end_time} [{reservation.status.value}] {booked}"
        )


def list_clubs(deps: AppDependencies) -> None:
    t('scripts.tools.list_clubs')
    clubs = deps.accounts.list_clubs()
    if not clubs:
        print("No clubs registered.")
        return
    for club in clubs:
        print(f"{club.club_name}: {club.admin_name} <{club.admin_email}>, {club.coach_count} coach(es)")


def show_stock(deps: AppDependencies, date: str, start_time: str, end_time: str) -> None:
    t('scripts.tools.show_stock')
    items = deps.inventory.as_mapping()
    free = available_stock_by_item(
        items, deps.reservations.get_active_reservations(), date, start_time, end_time
    )
    for item_id, quantity in free.items():
        print(f"{items[item_id].name}: {quantity}/{items[item_id].quantity} free")


def main(argv: Optional[List[str]] = None) -> int:
    t('scripts.tools.main')
    parser = argparse.ArgumentParser(description="SportTrack utility helpers")
    parser.add_argument("--data-dir", help="Data directory (defaults to SPORTTRACK_DATA_DIR)")
    parser.add_argument("--log-dir", default=LOG_DIR, help="Where this run's log files go")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list-items", help="Show the inventory")
    subparsers.add_parser("list-reservations", help="Show every reservation")
    subparsers.add_parser("list-clubs", help="Show registered clubs")
    stock = subparsers.add_parser("stock", help="Show free stock for a time window")
    stock.add_argument("date", help="YYYY-MM-DD")
    stock.add_argument("start", help="HH:MM")
    stock.add_argument("end", help="HH:MM")
    args = parser.parse_args(argv)

    settings = _resolve_settings(args.data_dir)
    setup_logging(production_mode=settings.production_mode, log_dir=args.log_dir)
    deps = build_dependencies(settings, read_only=True)
    if args.command == "list-items":
        list_items(deps)
    elif args.command == "list-reservations":
        list_reservations(deps)
    elif args.command == "list-clubs":
        list_clubs(deps)
    elif args.command == "stock":
        show_stock(deps, args.date, args.start, args.end)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
