#!/usr/bin/env python3
import sys
import argparse
import logging
from typing import List, Optional

from .config import APP_NAME, AppConfig, ConfigError, load_config
from .core import Schema, ToolItem, collect_keys, scalar_to_string, unique_manufacturers
from .loader import DBSource, load
from .state import DETAIL_GROUPS, ClassFilter, FamilyFilter, passes


def _load_items(args: argparse.Namespace) -> List[ToolItem]:
    """Load the tool list for the source chosen on the command line.

    Args:
        args: Command line arguments with the resolved config and source.
    """
    result = load(args.source, args.config)
    if not result.loaded:
        logging.warning(f"No tools loaded: {result.reason}")
    return result.items


def _find_tool(items: List[ToolItem], name: str) -> Optional[ToolItem]:
    for item in items:
        if item.name == name:
            return item
    lowered = name.lower()
    for item in items:
        if item.name.lower() == lowered:
            return item
    return None


def list_command(args: argparse.Namespace) -> None:
    """Executes the list command.

    Args:
        args (argparse.Namespace): Command-line arguments.
    """
    tool_filter = None
    if args.family:
        tool_filter = ClassFilter(args.family, args.holder) if args.holder is not None else FamilyFilter(args.family)
    elif args.holder is not None:
        logging.error("--holder requires --family")
        sys.exit(1)

    items = _load_items(args)
    shown = [item for item in items if passes(item, args.manufacturer, tool_filter, args.search)]
    for item in shown:
        print(f"  - {item.name}")
    logging.info(f"{len(shown)} of {len(items)} tools shown")


def info_command(args: argparse.Namespace) -> None:
    """Executes the info command.

    Args:
        args (argparse.Namespace): Command-line arguments.
    """
    items = _load_items(args)
    item = _find_tool(items, args.tool_name)
    if item is None:
        logging.error(f"Tool '{args.tool_name}' not found in the tool database.")
        sys.exit(1)

    print(f"Information for {item.name}:")
    for title, rows in DETAIL_GROUPS:
        print(f"  {title}:")
        for label, attr in rows:
            print(f"    {label}: {getattr(item, attr)}")

    if args.full:
        for schema in Schema:
            section = item.section(schema)
            print(f"  {schema.label}:")
            if not isinstance(section, dict) or not section:
                print("    (none)")
                continue
            for key in sorted(section):
                print(f"    {key}: {scalar_to_string(section[key])}")


def keys_command(args: argparse.Namespace) -> None:
    """Executes the keys command.

    Args:
        args (argparse.Namespace): Command-line arguments.
    """
    schema = Schema(args.schema)
    items = _load_items(args)
    for key in collect_keys(items, lambda item: item.section(schema)):
        print(f"  - {key}")


def manufacturers_command(args: argparse.Namespace) -> None:
    """Executes the manufacturers command.

    Args:
        args (argparse.Namespace): Command-line arguments.
    """
    for manufacturer in unique_manufacturers(_load_items(args)):
        print(f"  - {manufacturer}")


def help_command(parser: argparse.ArgumentParser) -> None:
    """Executes the help command.

    Args:
        parser (argparse.ArgumentParser): The top-level argument parser.
    """
    print(parser.format_help())
    sys.exit(0)


def launch_gui(args: argparse.Namespace) -> None:
    """
    Launch the graphical user interface.

    Args:
        args: Command line arguments containing the config and database source.
    """
    try:
        from PyQt6.QtWidgets import QApplication
        from .main_gui import create_window
    except ImportError:
        logging.error("PyQt6 is required for the GUI. Install it with: pip install PyQt6")
        sys.exit(1)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    # Create and show main window
    window = create_window(args.config, args.source)
    window.show()

    sys.exit(app.exec())


def _add_source_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--source",
        choices=[source.value for source in DBSource],
        help="Tool database to read (default: from configuration, normally online)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Essai Control Panel - browse the machine-shop tool database.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # List command
    list_parser = subparsers.add_parser("list", help="List tools")
    _add_source_argument(list_parser)
    list_parser.add_argument("--manufacturer", help="Only tools from this manufacturer")
    list_parser.add_argument("--search", default="", help="Case-insensitive text to look for in tool names")
    list_parser.add_argument("--family", help="Only tools with this Essai part number (overrides --search)")
    list_parser.add_argument("--holder", help="With --family, only tools in this holder")
    list_parser.set_defaults(func=list_command)

    # Info command
    info_parser = subparsers.add_parser("info", help="Show the details of a tool")
    info_parser.add_argument("tool_name", help="Name of the tool")
    _add_source_argument(info_parser)
    info_parser.add_argument(
        "--full",
        action="store_true",
        help="Also show the raw Solfex, Milling and Drilling attributes"
    )
    info_parser.set_defaults(func=info_command)

    # Keys command
    keys_parser = subparsers.add_parser("keys", help="List the attribute names used by a schema")
    keys_parser.add_argument("schema", choices=[schema.value for schema in Schema], help="Attribute schema")
    _add_source_argument(keys_parser)
    keys_parser.set_defaults(func=keys_command)

    # Manufacturers command
    manufacturers_parser = subparsers.add_parser("manufacturers", help="List manufacturers")
    _add_source_argument(manufacturers_parser)
    manufacturers_parser.set_defaults(func=manufacturers_command)

    # Help command
    help_parser = subparsers.add_parser("help", help="Show help")
    help_parser.set_defaults(func=lambda _: help_command(parser))

    # GUI command
    gui_parser = subparsers.add_parser("gui", help="Launch the graphical user interface")
    _add_source_argument(gui_parser)
    gui_parser.set_defaults(func=launch_gui)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config: AppConfig = load_config(args.config)
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
        logging.error(str(e))
        sys.exit(1)

    level = logging.DEBUG if args.verbose else config.logging_level
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(0)

    args.config = config
    source = getattr(args, "source", None) or config.default_source
    args.source = DBSource(source)

    args.func(args)


if __name__ == "__main__":
    main()
