# storefront/cli/runner.py

"""Headless CLI commands over a shop session."""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from storefront.models.filter_criteria import FilterCriteria, SortKey
from storefront.models.product import Product
from storefront.services.catalog import CatalogError
from storefront.services.money import format_price, has_discount, original_price
from storefront.services.shop_session import ShopSession, load_catalog

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _products_to_dicts(products: list[Product]) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [
        {
            "id": p.id,
            "name": p.name,
            "brand": p.brand,
            "category": p.category,
            "price": p.price,
            "discount": p.discount,
            "stock": p.stock,
        }
        for p in products
    ]


def _stars(average: float) -> str:
    filled = round(average)
    return "★" * filled + "☆" * (5 - filled)


def _print_products(session: ShopSession, products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(title="Shop", show_lines=True, title_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name", max_width=40)
    table.add_column("Brand", style="magenta")
    table.add_column("Category")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Stock", justify="right")
    table.add_column("Rating", justify="center")
    table.add_column("♥", justify="center")

    for p in products:
        price = format_price(p.price)
        if has_discount(p):
            was = format_price(original_price(p.price, p.discount))
            price = f"{price}\n[dim strike]{was}[/dim strike] -{p.discount:g}%"
        rating = session.rating_for(p.id)
        table.add_row(
            p.id,
            p.name,
            p.brand or "—",
            p.category or "—",
            price,
            "—" if p.stock is None else ("OUT" if p.stock == 0 else str(p.stock)),
            f"{_stars(rating.average)} ({rating.count})" if rating.count else "—",
            "♥" if session.wishlist.is_in_wishlist(p.id) else "",
        )

    Console().print(table)


def _print_cart(session: ShopSession) -> None:
    cart = session.cart
    if not cart.lines:
        _err.print("[yellow]Your cart is empty.[/yellow]")
        return
    table = Table(title="Cart", show_lines=True, title_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Product", max_width=40)
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Subtotal", justify="right", style="green")
    for line in cart.lines:
        table.add_row(
            line.product_id,
            line.product.name,
            str(line.quantity),
            format_price(line.product.price),
            format_price(line.subtotal),
        )
    table.add_section()
    table.add_row(
        "", "[bold]Total[/bold]", str(cart.get_total_items()), "",
        f"[bold]{format_price(cart.get_total_price())}[/bold]",
    )
    Console().print(table)


# ── Commands ─────────────────────────────────────────────


def cmd_shop(session: ShopSession, args: argparse.Namespace) -> int:
    criteria = FilterCriteria(
        category=args.category or None,
        brand=args.brand or None,
        search=args.search or None,
        min_price=args.min_price,
        max_price=args.max_price,
        sort=SortKey.parse(args.sort),
    )
    view = session.shop_view(criteria)
    _err.print(
        f"[green]{len(view.products)} of {view.total_in_catalog} products[/green]"
        f"  [dim]categories: {', '.join(view.categories) or '—'}"
        f" | brands: {', '.join(view.brands) or '—'}[/dim]"
    )
    if args.output_format == "json":
        json.dump(
            _products_to_dicts(view.products),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    else:
        _print_products(session, view.products)
    return 0


def cmd_cart(session: ShopSession, args: argparse.Namespace) -> int:
    cart = session.cart
    action = args.action
    if action == "add":
        if not session.add_to_cart(args.product_id, args.quantity):
            _err.print(f"[red]Unknown product: {args.product_id}[/red]")
            return 1
        if args.product_id not in cart:
            _err.print(f"[yellow]{args.product_id} is out of stock.[/yellow]")
    elif action == "remove":
        cart.remove_item(args.product_id)
    elif action == "set":
        cart.update_quantity(args.product_id, args.quantity)
    elif action == "clear":
        cart.clear_cart()
    elif action == "checkout":
        if not cart.lines:
            _err.print("[yellow]Nothing to check out.[/yellow]")
            return 1
        summary = cart.checkout()
        _err.print(
            f"[green]✓ Ordered {summary.total_items} items for "
            f"{format_price(summary.total_price)}[/green]"
        )
        return 0
    _print_cart(session)
    return 0


def cmd_wishlist(session: ShopSession, args: argparse.Namespace) -> int:
    wishlist = session.wishlist
    action = args.action
    if action == "toggle":
        added = wishlist.toggle_wishlist(args.product_id)
        _err.print(
            f"[green]{'Added' if added else 'Removed'} {args.product_id}[/green]"
        )
    elif action == "remove":
        wishlist.remove_from_wishlist(args.product_id)
    elif action == "clear":
        wishlist.clear_wishlist()
    elif action == "move":
        if not session.add_to_cart(args.product_id, 1):
            _err.print(f"[red]Unknown product: {args.product_id}[/red]")
            return 1
        if args.product_id not in session.cart:
            _err.print(
                f"[yellow]{args.product_id} is out of stock; "
                f"kept in wishlist.[/yellow]"
            )
            return 1
        wishlist.remove_from_wishlist(args.product_id)

    products = session.wishlist_products()
    _err.print(
        f"[bold]{len(products)} {'item' if len(products) == 1 else 'items'} saved[/bold]"
    )
    if products:
        _print_products(session, products)
    return 0


def cmd_reviews(session: ShopSession, args: argparse.Namespace) -> int:
    product = session.catalog.get_by_id(args.product_id)
    if product is None:
        _err.print(f"[red]Unknown product: {args.product_id}[/red]")
        return 1

    if args.comment is not None:
        _review, problems = session.submit_review(
            product_id=product.id,
            user_id=args.user,
            user_name=args.user,
            rating=args.rating,
            comment=args.comment,
        )
        if problems:
            for problem in problems:
                _err.print(f"[red]{problem}[/red]")
            return 1
        _err.print("[green]✓ Review submitted[/green]")

    if args.delete is not None:
        if not session.reviews.delete_review(args.delete):
            _err.print(f"[red]No review of yours with id {args.delete}[/red]")
            return 1
        _err.print("[green]✓ Review deleted[/green]")

    summary = session.rating_for(product.id)
    _err.print(
        f"[bold]{product.name}[/bold]  {_stars(summary.average)} "
        f"{summary.average:.1f} ({summary.count} reviews)"
    )
    for review in session.reviews_for(product.id):
        Console().print(
            f"{_stars(review.rating)}  [bold]{review.user_name}[/bold] "
            f"[dim]{review.created_at:%Y-%m-%d} {review.id}[/dim]\n  {review.comment}"
        )
    return 0


_COMMANDS = {
    "shop": cmd_shop,
    "cart": cmd_cart,
    "wishlist": cmd_wishlist,
    "reviews": cmd_reviews,
}


def run_command(args: argparse.Namespace) -> int:
    """Open a session, run one command and return an exit code."""
    try:
        catalog = load_catalog()
    except CatalogError as exc:
        logger.error("Catalog unavailable: %s", exc)
        _err.print(f"[red]Catalog unavailable: {exc}[/red]")
        return 1

    session = ShopSession(catalog)
    try:
        return _COMMANDS[args.command](session, args)
    finally:
        session.close()
