# main.py

"""Entry point for the storefront client (TUI or headless CLI)."""

import argparse
import logging
import sys

from storefront.config.logging_config import setup_logging
from storefront.models.filter_criteria import SortKey

logger = logging.getLogger("storefront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Storefront client: catalog, cart, wishlist and reviews.",
        epilog="Run without a command to launch the interactive TUI.",
    )
    sub = parser.add_subparsers(dest="command")

    shop = sub.add_parser("shop", help="List products with filters.")
    shop.add_argument("-q", "--search", default=None, help="Free-text search.")
    shop.add_argument("-c", "--category", default=None)
    shop.add_argument("-b", "--brand", default=None)
    shop.add_argument("--min-price", type=float, default=None, dest="min_price")
    shop.add_argument("--max-price", type=float, default=None, dest="max_price")
    shop.add_argument(
        "-s",
        "--sort",
        choices=[k.value for k in SortKey],
        default=SortKey.NAME_ASC.value,
    )
    shop.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )

    cart = sub.add_parser("cart", help="Show or change the cart.")
    cart_actions = cart.add_subparsers(dest="action")
    add = cart_actions.add_parser("add")
    add.add_argument("product_id")
    add.add_argument("-n", "--quantity", type=int, default=1)
    remove = cart_actions.add_parser("remove")
    remove.add_argument("product_id")
    set_qty = cart_actions.add_parser("set")
    set_qty.add_argument("product_id")
    set_qty.add_argument("quantity", type=int)
    cart_actions.add_parser("clear")
    cart_actions.add_parser("checkout")
    cart_actions.add_parser("show")

    wishlist = sub.add_parser("wishlist", help="Show or change the wishlist.")
    wish_actions = wishlist.add_subparsers(dest="action")
    for name in ("toggle", "remove", "move"):
        action = wish_actions.add_parser(name)
        action.add_argument("product_id")
    wish_actions.add_parser("clear")
    wish_actions.add_parser("show")

    reviews = sub.add_parser("reviews", help="Show or write product reviews.")
    reviews.add_argument("product_id")
    reviews.add_argument("-r", "--rating", type=int, default=5)
    reviews.add_argument("-m", "--comment", default=None)
    reviews.add_argument("-u", "--user", default="guest")
    reviews.add_argument(
        "-d", "--delete", default=None, metavar="REVIEW_ID",
        help="Delete one of your reviews.",
    )

    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from storefront.ui.app import StorefrontApp

    app = StorefrontApp()
    try:
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        app.session.close()
        logger.info("storefront TUI shutting down")


def main() -> None:
    """Route to the TUI (no command) or a headless CLI command."""
    log_file = setup_logging()
    logger.info("storefront starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    if args.command is None:
        _run_tui()
        return

    from storefront.cli.runner import run_command

    sys.exit(run_command(args))


if __name__ == "__main__":
    main()
