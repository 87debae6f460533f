"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from datetime import date

from dotenv import load_dotenv

from .client import APIError, PantryAPI
from .config import PantryConfig, load_config
from .engine import (
    category_breakdown,
    expiring_soon,
    stock_level,
    summarize,
)
from .household import Household
from .session import SessionContext
from .types import PantryItem


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pantrypal",
        description="Household pantry, shopping list and recipe matcher",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="path to a TOML config file",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    dash_parser = sub.add_parser("dashboard", help="low stock, expiring items, categories")
    dash_parser.add_argument("--json", action="store_true", help="JSON output")

    exp_parser = sub.add_parser("expiring", help="items expiring soon")
    exp_parser.add_argument("--json", action="store_true", help="JSON output")

    match_parser = sub.add_parser("match", help="what can I cook with my pantry?")
    match_parser.add_argument("--query", "-q", type=str, default="", help="search text")
    match_parser.add_argument(
        "--diet", choices=["All", "Veg", "NonVeg"], default="All",
        help="diet filter",
    )
    match_parser.add_argument("--json", action="store_true", help="JSON output")

    shop_parser = sub.add_parser("shopping", help="shopping list with budget progress")
    shop_parser.add_argument("--json", action="store_true", help="JSON output")

    offers_parser = sub.add_parser("offers", help="list items with coupons by category")
    offers_parser.add_argument("--json", action="store_true", help="JSON output")

    budget_parser = sub.add_parser("budget", help="set the shopping list budget")
    budget_parser.add_argument(
        "amount", type=float, help="budget limit (0 = no limit)"
    )

    add_parser = sub.add_parser("add", help="add items to the shopping list")
    add_parser.add_argument("name", type=str, nargs="*", help="item name")
    add_parser.add_argument(
        "--price", type=float, default=None,
        help="price per item (estimated when omitted)",
    )
    add_parser.add_argument(
        "--low-stock", action="store_true",
        help="add every low-stock pantry item not yet on the list",
    )

    notif_parser = sub.add_parser("notifications", help="show notifications")
    notif_parser.add_argument(
        "--mark-read", action="store_true", help="mark all as read"
    )

    members_parser = sub.add_parser("members", help="household members and invites")
    members_parser.add_argument(
        "--invite", action="store_true", help="generate a new invite link"
    )
    members_parser.add_argument(
        "--remove", type=str, default=None, metavar="EMAIL",
        help="remove a member",
    )

    sub.add_parser("checkout", help="log checked items as a trip and restock")

    use_parser = sub.add_parser("use", help="log usage of a pantry item")
    use_parser.add_argument("item_id", type=str, help="pantry item id")
    use_parser.add_argument("amount", type=float, help="amount used")

    ana_parser = sub.add_parser("analytics", help="spending against the budget goal")
    ana_parser.add_argument(
        "--timeframe", choices=["weekly", "monthly", "yearly"], default="monthly",
    )
    ana_parser.add_argument("--json", action="store_true", help="JSON output")

    chat_parser = sub.add_parser("chat", help="ask the AI kitchen assistant")
    chat_parser.add_argument("message", type=str, nargs="+")

    est_parser = sub.add_parser("estimate", help="estimate the price of an item")
    est_parser.add_argument("name", type=str, nargs="+")

    sub.add_parser("schedule", help="run the reminder scheduler in the foreground")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    load_dotenv()

    config = load_config(args.config)

    try:
        match args.command:
            case "dashboard":
                asyncio.run(_cmd_dashboard(config, args))
            case "expiring":
                asyncio.run(_cmd_expiring(config, args))
            case "match":
                asyncio.run(_cmd_match(config, args))
            case "shopping":
                asyncio.run(_cmd_shopping(config, args))
            case "offers":
                asyncio.run(_cmd_offers(config, args))
            case "budget":
                asyncio.run(_cmd_budget(config, args))
            case "add":
                asyncio.run(_cmd_add(config, args))
            case "notifications":
                asyncio.run(_cmd_notifications(config, args))
            case "members":
                asyncio.run(_cmd_members(config, args))
            case "checkout":
                asyncio.run(_cmd_checkout(config))
            case "use":
                asyncio.run(_cmd_use(config, args))
            case "analytics":
                asyncio.run(_cmd_analytics(config, args))
            case "chat":
                asyncio.run(_cmd_chat(config, args))
            case "estimate":
                asyncio.run(_cmd_estimate(config, args))
            case "schedule":
                _cmd_schedule(config)
    except (APIError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


def _make_api(config: PantryConfig) -> PantryAPI:
    return PantryAPI(
        config.api.base_url,
        session=SessionContext.from_config(config),
        timeout=config.api.timeout,
    )


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


async def _cmd_dashboard(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        view = await Household(api, config).dashboard(date.today())

    if args.json:
        _print_json({
            "low_stock": [asdict(i) for i in view.low_stock],
            "expiring": [
                {"name": e.item.name, "days_left": e.days_left, "expired": e.expired}
                for e in view.expiring
            ],
            "categories": view.category_counts,
        })
        return

    print("Low stock")
    if not view.low_stock:
        print("  nothing is running low")
    for item in view.low_stock:
        print(
            f"  {item.name:<20} {item.quantity:g} {item.unit} left "
            f"({stock_level(item):.0f}% of threshold)"
        )
    print()
    print("Expiring soon")
    if not view.expiring:
        print("  nothing expires this week")
    for entry in view.expiring:
        print(f"  {entry.item.name:<20} {entry.label}")
    print()
    print("Virtual pantry")
    for category, count in view.category_counts.items():
        print(f"  {category:<14} {count} items")


async def _cmd_expiring(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        pantry = await api.get_pantry()
    expiring = expiring_soon(
        pantry, date.today(), window_days=config.pantry.expiring_days
    )

    if args.json:
        _print_json([
            {"id": e.item.id, "name": e.item.name, "days_left": e.days_left}
            for e in expiring
        ])
        return
    if not expiring:
        print("Nothing expires in the next %d days." % config.pantry.expiring_days)
        return
    for entry in expiring:
        mark = "!" if entry.expired else " "
        print(f"{mark} {entry.item.name:<20} {entry.label}")


async def _cmd_match(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        ranked = await Household(api, config).pantry_match(
            query=args.query, diet=args.diet
        )

    if args.json:
        _print_json([asdict(r) for r in ranked])
        return
    if not ranked:
        print("No recipes found.")
        return
    for r in ranked:
        bar = "█" * (r.match_percentage // 10)
        print(
            f"{r.match_percentage:>3}% {bar:<10} {r.title}  "
            f"({r.matched_count}/{r.total_required} ingredients)"
        )
        if r.missing_ingredients:
            print(f"      missing: {', '.join(r.missing_ingredients)}")


async def _cmd_shopping(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        view = await Household(api, config).shopping()

    cur = config.shopping.currency
    p = view.progress
    if args.json:
        _print_json({
            "progress": asdict(p),
            "sections": {
                s: [asdict(i) for i in items] for s, items in view.sections.items()
            },
            "suggestions": [asdict(i) for i in view.suggestions],
        })
        return

    budget = f"{cur}{p.budget_limit:g}" if p.budget_limit > 0 else "No Limit"
    state = "OVER BUDGET" if p.over_budget else p.label
    print(f"Spent {cur}{p.spent:.2f}  Budget {budget}  {state}")
    if p.budget_limit > 0:
        print(f"Remaining {cur}{p.remaining:.2f}")
    print()
    for section, items in view.sections.items():
        print(f"{section} ({len(items)} {'item' if len(items) == 1 else 'items'})")
        for item in items:
            print(f"  [ ] {item.name:<20} {item.quantity:g} {item.unit or 'Unit'}"
                  f"  ~{cur}{item.price:.2f}")
    checked = [i for i in view.items if i.is_checked]
    if checked:
        print(f"Checked items ({len(checked)})")
        for item in checked:
            print(f"  [x] {item.name}")
    if view.suggestions:
        print()
        print("Low stock suggestions")
        for item in view.suggestions:
            print(f"  {item.name} ({item.quantity:g} {item.unit} left)")


async def _cmd_offers(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        view = await Household(api, config).shopping()

    if args.json:
        _print_json(view.offers)
        return
    if not view.offers:
        print("No coupons apply to your list.")
        return
    for category, names in view.offers.items():
        print(f"{category}: {', '.join(names)}")


async def _cmd_budget(config: PantryConfig, args) -> None:
    if args.amount < 0:
        raise ValueError("budget must not be negative")
    async with _make_api(config) as api:
        await api.set_budget(args.amount)
    if args.amount > 0:
        print(f"Budget set to {config.shopping.currency}{args.amount:g}.")
    else:
        print("Budget limit removed.")


async def _cmd_add(config: PantryConfig, args) -> None:
    if not args.name and not args.low_stock:
        raise ValueError("give an item name or --low-stock")

    async with _make_api(config) as api:
        household = Household(api, config)
        if args.low_stock:
            view = await household.dashboard(date.today())
            items = view.low_stock
            note = "From Dashboard Low Stock"
        else:
            items = [PantryItem(id=None, name=" ".join(args.name))]
            note = ""
        for item in items:
            await household.add_to_list(item, price=args.price, note=note)
            print(f"Added {item.name} to the shopping list.")

    if not items:
        print("Nothing is running low.")


async def _cmd_notifications(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        if args.mark_read:
            count = await Household(api, config).mark_all_read()
            print(f"Marked {count} notifications as read.")
            return
        notifications = await api.get_notifications()

    if not notifications:
        print("No notifications.")
    for n in notifications:
        mark = " " if n.is_read else "*"
        print(f"{mark} {n.message}")


async def _cmd_members(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        if args.remove:
            await api.remove_member(args.remove)
            print(f"Removed {args.remove}.")
            return
        if args.invite:
            link = await api.generate_invite_link()
            print(f"Invite link: {link}")
            return
        members = await api.get_members()

    if not members:
        print("No members yet.")
    for m in members:
        print(f"  {m.email:<30} {m.role:<8} {m.status}")


async def _cmd_checkout(config: PantryConfig) -> None:
    async with _make_api(config) as api:
        result = await Household(api, config).checkout()
    print(
        f"Check-out complete! {result.items_logged} items logged into pantry "
        f"({config.shopping.currency}{result.total_spent:.2f} spent)."
    )


async def _cmd_use(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        result = await Household(api, config).log_usage(args.item_id, args.amount)
    if result.remove:
        print(f"Item {args.item_id} used up and removed from pantry.")
    else:
        print(f"Item {args.item_id}: {result.quantity:g} left.")


async def _cmd_analytics(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        report = await api.get_analytics(args.timeframe)

    summary = summarize(report.goal, report.spent)
    breakdown = category_breakdown(report.categories)
    if args.json:
        _print_json({
            "summary": asdict(summary),
            "categories": [
                {"name": c.name, "amount": c.amount, "share": share}
                for c, share in breakdown
            ],
        })
        return

    cur = config.shopping.currency
    print(f"Remaining budget: {cur}{summary.remaining:.2f}")
    print(f"{cur}{summary.spent:.2f} spent  Goal: {cur}{summary.goal:.2f}"
          f"  ({summary.percent:.0f}%)")
    for cat, share in breakdown:
        print(f"  {cat.name:<16} {cur}{cat.amount:.2f}  {share:.0%}")


async def _cmd_chat(config: PantryConfig, args) -> None:
    async with _make_api(config) as api:
        reply = await api.chat(" ".join(args.message))
    print(reply)


async def _cmd_estimate(config: PantryConfig, args) -> None:
    name = " ".join(args.name)
    async with _make_api(config) as api:
        price = await api.estimate_price(name)
    if price is None:
        print(f"No estimate available for {name}.")
    else:
        print(f"{name}: ~{config.shopping.currency}{price:.2f}")


def _cmd_schedule(config: PantryConfig) -> None:
    from .scheduler import ReminderScheduler

    if not config.reminders.enabled:
        print("Reminders are disabled; set [reminders] enabled = true.")
        return

    async def _run() -> None:
        scheduler = ReminderScheduler(config)
        scheduler.start()
        for job in scheduler.get_jobs():
            print(f"  {job['name']}: next run {job['next_run']}")
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.stop()

    try:
        asyncio.run(_run())
    except ImportError as e:
        print(f"Scheduler error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass
