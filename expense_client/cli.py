"""Command-line front end for the Expense Tracker API.

Usage:
    python -m expense_client.cli signup --email me@example.com --name Me --password secret
    python -m expense_client.cli login --email me@example.com --password secret
    python -m expense_client.cli google-login --id-token <google id token>
    python -m expense_client.cli dashboard [--range month | --start 2025-01-01 --end 2025-01-31]
    python -m expense_client.cli expenses list [--category 3] [--range week] [--page 2]
    python -m expense_client.cli expenses add --amount 12.50 --category 3 --currency 1
    python -m expense_client.cli categories add --name Groceries --color "#22C55E"
    python -m expense_client.cli currencies add --name EUR --rate 1.08
    python -m expense_client.cli logout
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from expense_client.api.categories import CategoriesApi
from expense_client.api.client import ApiClient
from expense_client.api.currencies import CurrenciesApi
from expense_client.api.errors import ApiError, get_error_message
from expense_client.config import settings
from expense_client.formatting import format_currency, format_date
from expense_client.schemas.category import UNCATEGORIZED
from expense_client.schemas.currency import Currency, RateDirection
from expense_client.services.auth_service import AuthError, AuthService
from expense_client.services.conversion import infer_direction, to_decimal
from expense_client.services.crud_service import (
    category_actions,
    currency_actions,
    expense_actions,
)
from expense_client.services.dashboard_service import (
    DashboardState,
    DataFetchOrchestrator,
    ExpenseListController,
)
from expense_client.services.filter_state import QUICK_RANGES
from expense_client.services.normalization import unwrap_categories, unwrap_currencies
from expense_client.services.notifications import Notification, Notifier
from expense_client.services.session_service import SessionManager
from expense_client.services.storage_service import LocalStorage

DELETE_CATEGORY_NOTE = "Expenses in this category will not be deleted."


class Context:
    def __init__(self, client: ApiClient, notifier: Notifier) -> None:
        self.client = client
        self.notifier = notifier
        self.auth = AuthService(client)


def _print_notification(notification: Notification) -> None:
    stream = sys.stderr if notification.variant == "destructive" else sys.stdout
    print(f"{notification.title}: {notification.description}", file=stream)


def _on_session_ended(reason: str) -> None:
    if reason == "unauthorized":
        print("Session expired. Please log in again.", file=sys.stderr)


def _parse_date(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from None
    return parsed if parsed.tzinfo else parsed.astimezone()


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _print_summary(state: DashboardState) -> None:
    view = state.summary_view
    print(f"Total expenses:     {view.reference_total_display}")
    print(f"Total transactions: {view.total_count}")
    print(f"Categories:         {len(state.categories)}")

    if view.currencies:
        print("\nBy currency")
        print(f"{'Currency':<12} {'Amount':>16} {'USD':>14} {'Count':>6}")
        print("-" * 51)
        for row in view.currencies:
            print(
                f"{row.name:<12} {row.display:>16} "
                f"{format_currency(row.reference_amount):>14} {row.count:>6}"
            )

    print("\nBy category")
    if not view.categories:
        print("No expenses yet.")
        return
    for row in view.categories:
        plural = "" if row.expense_count == 1 else "s"
        print(f"{row.name:<24} {row.share:>3}%  {row.expense_count} expense{plural}  {row.breakdown}")


def _print_expenses(state: DashboardState) -> None:
    if not state.expenses:
        print("No expenses found.")
        return
    print(f"{'ID':<6} {'Date':<14} {'Category':<20} {'Amount':>18}  Description")
    print("-" * 80)
    for e in state.expenses:
        category = e.category.name if e.category else UNCATEGORIZED
        currency = e.currency.name if e.currency else None
        print(
            f"{e.id:<6} {format_date(e.date):<14} {category:<20} "
            f"{format_currency(e.amount, currency):>18}  {e.description or ''}"
        )
    p = state.pagination
    if p is not None and p.total_pages > 1:
        print(f"\nPage {p.page} of {p.total_pages} ({p.total} total)")


def _rate_text(c: Currency) -> str:
    rate = to_decimal(c.usd_exchange_rate)
    if rate is None or rate <= 0:
        return f"invalid rate ({c.usd_exchange_rate})"
    direction = c.rate_direction or infer_direction(rate)
    if direction is RateDirection.UNITS_PER_USD:
        return f"1 USD = {rate} {c.name}"
    return f"1 {c.name} = {rate} USD"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def signup(ctx: Context, args: argparse.Namespace) -> None:
    user = await ctx.auth.signup(args.email, args.password, args.name)
    print(f"Created account and signed in as {user.email}")


async def login(ctx: Context, args: argparse.Namespace) -> None:
    user = await ctx.auth.login(args.email, args.password)
    print(f"Signed in as {user.name or user.email}")


async def google_login(ctx: Context, args: argparse.Namespace) -> None:
    user = await ctx.auth.google_login(args.id_token)
    print(f"Signed in with Google as {user.email}")


async def logout(ctx: Context, _args: argparse.Namespace) -> None:
    ctx.auth.logout()
    print("Signed out")


async def profile(ctx: Context, _args: argparse.Namespace) -> None:
    user = await ctx.auth.restore()
    if user is None:
        print("Not signed in")
        sys.exit(1)
    print(f"{user.name or ''} <{user.email}> (id={user.id})")


async def _load_filtered(args: argparse.Namespace, controller: ExpenseListController) -> DashboardState:
    """Apply the command-line filters as one change, loading exactly once."""
    manager = controller.filters
    before = manager.filters
    async with manager.batch():
        if getattr(args, "category", None):
            await manager.set_category(args.category)
        if args.range:
            await manager.apply_quick_range(args.range)
        elif args.start or args.end:
            await manager.set_date_range(args.start, args.end)
        if getattr(args, "page", None):
            await manager.set_page(args.page)
    if manager.filters == before:
        return await controller.refresh()
    return controller.state


async def dashboard(ctx: Context, args: argparse.Namespace) -> None:
    orchestrator = DataFetchOrchestrator(ctx.client, ctx.notifier)
    controller = ExpenseListController(orchestrator, limit=settings.RECENT_EXPENSES_LIMIT)
    state = await _load_filtered(args, controller)
    if orchestrator.error:
        sys.exit(1)
    _print_summary(state)
    print("\nRecent expenses")
    _print_expenses(state)


async def list_expenses(ctx: Context, args: argparse.Namespace) -> None:
    orchestrator = DataFetchOrchestrator(ctx.client, ctx.notifier, "Failed to load expenses")
    controller = ExpenseListController(orchestrator, limit=args.limit)
    state = await _load_filtered(args, controller)
    if orchestrator.error:
        sys.exit(1)
    _print_expenses(state)


async def _mutate(ok: Awaitable[bool]) -> None:
    if not await ok:
        sys.exit(1)


def _expense_payload(args: argparse.Namespace) -> dict[str, Any]:
    payload = {
        "amount": args.amount,
        "description": args.description,
        "date": args.date,
        "category_id": args.category,
        "currency_id": args.currency,
    }
    return {k: v for k, v in payload.items() if v is not None}


async def add_expense(ctx: Context, args: argparse.Namespace) -> None:
    await _mutate(expense_actions(ctx.client, ctx.notifier).save(_expense_payload(args)))


async def update_expense(ctx: Context, args: argparse.Namespace) -> None:
    await _mutate(expense_actions(ctx.client, ctx.notifier).save(_expense_payload(args), args.id))


async def delete_expense(ctx: Context, args: argparse.Namespace) -> None:
    await _mutate(expense_actions(ctx.client, ctx.notifier).delete(args.id))


async def list_categories(ctx: Context, _args: argparse.Namespace) -> None:
    categories = unwrap_categories(await CategoriesApi(ctx.client).list())
    if not categories:
        print("No categories found.")
        return
    print(f"{'ID':<6} {'Name':<24} {'Color':<9} {'Expenses':>8}  Description")
    print("-" * 70)
    for c in categories:
        print(f"{c.id:<6} {c.name:<24} {c.color or '':<9} {c.expense_count:>8}  {c.description or ''}")


def _category_payload(args: argparse.Namespace) -> dict[str, Any]:
    payload = {"name": args.name, "description": args.description, "color": args.color}
    return {k: v for k, v in payload.items() if v is not None}


async def add_category(ctx: Context, args: argparse.Namespace) -> None:
    await _mutate(category_actions(ctx.client, ctx.notifier).save(_category_payload(args)))


async def update_category(ctx: Context, args: argparse.Namespace) -> None:
    await _mutate(category_actions(ctx.client, ctx.notifier).save(_category_payload(args), args.id))


async def delete_category(ctx: Context, args: argparse.Namespace) -> None:
    print(DELETE_CATEGORY_NOTE)
    await _mutate(category_actions(ctx.client, ctx.notifier).delete(args.id))


async def list_currencies(ctx: Context, _args: argparse.Namespace) -> None:
    currencies = unwrap_currencies(await CurrenciesApi(ctx.client).list())
    if not currencies:
        print("No currencies found.")
        return
    print(f"{'ID':<6} {'Name':<12} Rate")
    print("-" * 50)
    for c in currencies:
        print(f"{c.id:<6} {c.name:<12} {_rate_text(c)}")


def _currency_payload(args: argparse.Namespace) -> dict[str, Any]:
    payload = {"name": args.name, "usd_exchange_rate": args.rate, "rate_direction": args.direction}
    return {k: v for k, v in payload.items() if v is not None}


async def add_currency(ctx: Context, args: argparse.Namespace) -> None:
    await _mutate(currency_actions(ctx.client, ctx.notifier).save(_currency_payload(args)))


async def update_currency(ctx: Context, args: argparse.Namespace) -> None:
    await _mutate(currency_actions(ctx.client, ctx.notifier).save(_currency_payload(args), args.id))


async def delete_currency(ctx: Context, args: argparse.Namespace) -> None:
    await _mutate(currency_actions(ctx.client, ctx.notifier).delete(args.id))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_range_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--range", choices=QUICK_RANGES, help="Preset date range ending now")
    parser.add_argument("--start", type=_parse_date, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=_parse_date, help="End date (YYYY-MM-DD)")


def _add_expense_fields(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--amount", required=required)
    parser.add_argument("--category", type=int, required=required, help="Category id")
    parser.add_argument("--currency", type=int, required=required, help="Currency id")
    parser.add_argument("--description")
    parser.add_argument("--date", type=_parse_date)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="expense-tracker", description="Expense Tracker client")
    parser.add_argument("--api-url", help="Backend base URL (overrides API_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("signup", help="Create an account and sign in")
    p.add_argument("--email", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--password", required=True)
    p.set_defaults(func=signup)

    p = sub.add_parser("login", help="Sign in with email and password")
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.set_defaults(func=login)

    p = sub.add_parser("google-login", help="Sign in with a Google ID token")
    p.add_argument("--id-token", required=True)
    p.set_defaults(func=google_login)

    p = sub.add_parser("logout", help="Forget the stored session")
    p.set_defaults(func=logout)

    p = sub.add_parser("profile", help="Show the signed-in user")
    p.set_defaults(func=profile)

    p = sub.add_parser("dashboard", help="Totals, category breakdown and recent expenses")
    _add_range_args(p)
    p.set_defaults(func=dashboard)

    # Expenses
    expenses = sub.add_parser("expenses", help="Manage expenses").add_subparsers(dest="action", required=True)
    p = expenses.add_parser("list")
    _add_range_args(p)
    p.add_argument("--category", type=int)
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--limit", type=int, default=settings.DEFAULT_PAGE_SIZE)
    p.set_defaults(func=list_expenses)
    p = expenses.add_parser("add")
    _add_expense_fields(p, required=True)
    p.set_defaults(func=add_expense)
    p = expenses.add_parser("update")
    p.add_argument("id", type=int)
    _add_expense_fields(p, required=False)
    p.set_defaults(func=update_expense)
    p = expenses.add_parser("delete")
    p.add_argument("id", type=int)
    p.set_defaults(func=delete_expense)

    # Categories
    categories = sub.add_parser("categories", help="Manage categories").add_subparsers(dest="action", required=True)
    p = categories.add_parser("list")
    p.set_defaults(func=list_categories)
    for name, func, required in (("add", add_category, True), ("update", update_category, False)):
        p = categories.add_parser(name)
        if not required:
            p.add_argument("id", type=int)
        p.add_argument("--name", required=required)
        p.add_argument("--description")
        p.add_argument("--color", help="Hex colour, e.g. #3B82F6")
        p.set_defaults(func=func)
    p = categories.add_parser("delete")
    p.add_argument("id", type=int)
    p.set_defaults(func=delete_category)

    # Currencies
    currencies = sub.add_parser("currencies", help="Manage currencies").add_subparsers(dest="action", required=True)
    p = currencies.add_parser("list")
    p.set_defaults(func=list_currencies)
    for name, func, required in (("add", add_currency, True), ("update", update_currency, False)):
        p = currencies.add_parser(name)
        if not required:
            p.add_argument("id", type=int)
        p.add_argument("--name", required=required)
        p.add_argument("--rate", required=required, help="Exchange rate against USD")
        p.add_argument(
            "--direction",
            choices=[d.value for d in RateDirection],
            help="usdPerUnit: 1 unit = RATE USD; unitsPerUSD: 1 USD = RATE units",
        )
        p.set_defaults(func=func)
    p = currencies.add_parser("delete")
    p.add_argument("id", type=int)
    p.set_defaults(func=delete_currency)

    return parser


async def run(
    args: argparse.Namespace,
    client: ApiClient | None = None,
    notifier: Notifier | None = None,
) -> None:
    notifier = notifier or Notifier()
    notifier.subscribe(_print_notification)
    if client is None:
        session = SessionManager(LocalStorage())
        client = ApiClient(session, base_url=args.api_url)
    client.session.subscribe(_on_session_ended)
    command: Callable[[Context, argparse.Namespace], Awaitable[None]] = args.func
    async with client:
        ctx = Context(client, notifier)
        try:
            await command(ctx, args)
        except (ApiError, AuthError) as exc:
            print(f"Error: {get_error_message(exc)}", file=sys.stderr)
            sys.exit(1)
        finally:
            ctx.auth.close()


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
