"""
CLI runner for the highlight store.

Usage:
    python -m highlight_store.run [OPTIONS] COMMAND

    # Create or upgrade the database
    python -m highlight_store.run init

    # Register a highlight for member 42
    python -m highlight_store.run add 42 "rust(acean)?"

    # Which members would be notified by a message?
    python -m highlight_store.run find "I love crustaceans"
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import HighlightConfig
from .errors import DuplicateHighlight, InvalidInput, StorageUnavailable
from .matching import HighlightMatcher, validate_pattern
from .models import HighlightStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("highlight-store")

DATABASE_DISABLED_MSG = "Database is disabled; highlights are unavailable."

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_UNAVAILABLE = 2


def cmd_init(store: HighlightStore, args: argparse.Namespace, config: HighlightConfig) -> int:
    applied = store.initialize()
    if applied:
        logger.info(f"Applied {len(applied)} migration(s): {applied}")
    else:
        logger.info("Database already up to date")
    return EXIT_OK


def cmd_add(store: HighlightStore, args: argparse.Namespace, config: HighlightConfig) -> int:
    validate_pattern(args.text, config.matching.max_pattern_length)

    # Advisory only; add() is still the authority on duplicates
    if store.exists(args.member_id, args.text):
        print("already highlighted")
        return EXIT_OK

    try:
        record = store.add(args.member_id, args.text)
    except DuplicateHighlight:
        print("already highlighted")
        return EXIT_OK

    logger.debug(f"Added highlight {record.id} for member {record.member_id}")
    print("hl added!")
    return EXIT_OK


def cmd_remove(store: HighlightStore, args: argparse.Namespace, config: HighlightConfig) -> int:
    if args.id is not None:
        removed = store.remove_by_id(args.member_id, args.id)
    elif args.text:
        removed = store.remove(args.member_id, args.text)
    else:
        raise InvalidInput("Give either highlight text or --id")

    print("hl removed!" if removed else "hl not found.")
    return EXIT_OK


def cmd_list(store: HighlightStore, args: argparse.Namespace, config: HighlightConfig) -> int:
    records = store.list(args.member_id)
    if not records:
        print("you're not tracking any patterns")
        return EXIT_OK

    print("you're tracking these patterns")
    for record in records:
        print(f"[{record.id}] {record.highlight_text}")
    return EXIT_OK


def cmd_match(store: HighlightStore, args: argparse.Namespace, config: HighlightConfig) -> int:
    matcher = HighlightMatcher.load(store)
    matched = matcher.matches(args.member_id, args.haystack)
    print("these patterns match your haystack")
    for pattern in matched:
        print(pattern)
    return EXIT_OK


def cmd_find(store: HighlightStore, args: argparse.Namespace, config: HighlightConfig) -> int:
    matcher = HighlightMatcher.load(store)
    for member_id, pattern in matcher.find(args.haystack):
        print(f"{member_id}: {pattern}")
    return EXIT_OK


COMMANDS = {
    "init": cmd_init,
    "add": cmd_add,
    "remove": cmd_remove,
    "list": cmd_list,
    "match": cmd_match,
    "find": cmd_find,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="highlight-store: per-member highlight patterns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Create the database
    python -m highlight_store.run init

    # Add, list and remove highlights
    python -m highlight_store.run add 42 "ferris"
    python -m highlight_store.run list 42
    python -m highlight_store.run remove 42 --id 1

    # Use a specific config file
    python -m highlight_store.run --config highlights.yaml list 42
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=Path("highlights.yaml"),
        help="Path to config file (default: highlights.yaml)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        help="Override database path from config",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init", help="Create or upgrade the database schema")

    add = subparsers.add_parser("add", help="Add a highlight for a member")
    add.add_argument("member_id", type=int)
    add.add_argument("text")

    remove = subparsers.add_parser("remove", help="Remove a highlight by text or id")
    remove.add_argument("member_id", type=int)
    remove.add_argument("text", nargs="?")
    remove.add_argument("--id", type=int, help="Remove by highlight id instead of text")

    list_ = subparsers.add_parser("list", help="List a member's highlights")
    list_.add_argument("member_id", type=int)

    match = subparsers.add_parser("match", help="Show which of a member's highlights match text")
    match.add_argument("member_id", type=int)
    match.add_argument("haystack")

    find = subparsers.add_parser("find", help="Show which members' highlights match text")
    find.add_argument("haystack")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    config = HighlightConfig.from_yaml(args.config)
    db_path = args.db or config.store.get_db_path()
    logger.debug(f"Config loaded from {args.config}")
    logger.debug(f"Database: {db_path}")

    if not config.enabled:
        print(DATABASE_DISABLED_MSG)
        return EXIT_REJECTED

    if args.command != "init" and not db_path.exists():
        logger.error(f"Database not found: {db_path}")
        logger.error("Run 'python -m highlight_store.run init' first to create the database.")
        return EXIT_REJECTED

    store = HighlightStore(db_path, timeout=config.store.timeout_seconds)

    try:
        return COMMANDS[args.command](store, args, config)
    except InvalidInput as e:
        print(e.detail)
        return EXIT_REJECTED
    except StorageUnavailable as e:
        logger.error(f"Highlight storage unavailable: {e.detail}")
        return EXIT_UNAVAILABLE


if __name__ == "__main__":
    sys.exit(main())
