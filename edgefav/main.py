#!/usr/bin/env python3
"""CLI interface for the managed favourites editor."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple
from edgefav.backup.export_manager import ExportManager
from edgefav.core.errors import FavoritesError
from edgefav.core.export_model import export_model_json
from edgefav.core.models import FavoritesTree, count_nodes
from edgefav.formats.base import detect_format, get_codec
from edgefav.ui.interactive import EditorSession, format_outline, interactive_config_wizard, run_editor
from edgefav.utils.logger import set_log_level, setup_logger

logger = setup_logger()

FORMATS = ['windows', 'macos']
DEFAULT_CONFIG_FILE = Path("config.json")


def load_config(config_file: Path = DEFAULT_CONFIG_FILE) -> dict:
    """Load configuration from config.json."""
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config = json.load(f)
            if isinstance(config, dict):
                return config
            logger.warning(f"Ignoring config {config_file}: expected a JSON object")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config: {e}")
    return {}


def save_config(config: dict, config_file: Path = DEFAULT_CONFIG_FILE):
    """Save configuration to config.json."""
    try:
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=2)
    except OSError as e:
        logger.error(f"Failed to save config: {e}")


def _export_manager(config: dict) -> ExportManager:
    return ExportManager(Path(config.get("export_dir", "./exports")))


def _read_tree(args, config: dict) -> Tuple[FavoritesTree, str]:
    """Import the file named on the command line."""
    path = Path(args.file)
    text = _export_manager(config).read_document(path)
    format_name = args.from_format or detect_format(path, text)
    tree = get_codec(format_name, config).import_document(text)
    return tree, format_name


def cmd_show(args, config: dict) -> int:
    """Handle show command."""
    try:
        tree, format_name = _read_tree(args, config)
    except (FavoritesError, OSError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    folders, links = count_nodes(tree.items)
    print(format_outline(tree))
    print(f"\nFormat: {format_name} | {folders} folder(s), {links} link(s)")
    return 0


def cmd_json(args, config: dict) -> int:
    """Handle json command."""
    try:
        tree, _ = _read_tree(args, config)
    except (FavoritesError, OSError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    print(export_model_json(tree))
    return 0


def cmd_convert(args, config: dict) -> int:
    """Handle convert command."""
    try:
        tree, source_format = _read_tree(args, config)
    except (FavoritesError, OSError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    if args.root_label:
        tree.root_label = args.root_label.strip() or tree.root_label

    try:
        content = get_codec(args.to_format, config).export_document(tree)
        output = Path(args.output) if args.output else None
        saved = _export_manager(config).save(args.to_format, content, output)
    except (FavoritesError, OSError) as e:
        logger.error(f"Export failed: {e}")
        return 1

    logger.info(f"✓ Converted {source_format} → {args.to_format}: {saved}")
    return 0


def cmd_list_exports(args, config: dict) -> int:
    """Handle list-exports command."""
    export_manager = _export_manager(config)
    exports = export_manager.list_exports(format_name=args.format)

    if not exports:
        print("No exports found")
        if args.format:
            print(f"Filtered by format: {args.format}")
        print(f"\nExport directory: {export_manager.export_dir.absolute()}")
        return 0

    print(f"\n{'='*70}")
    print("EXPORTED DOCUMENTS")
    print(f"{'='*70}\n")
    print(f"📁 Export directory: {export_manager.export_dir.absolute()}\n")

    for i, export in enumerate(exports, 1):
        size = export.get('size', 0)
        print(f"{i}. {export.get('format', 'unknown').upper()} - {export.get('file', 'unknown')}")
        print(f"   Date: {export.get('timestamp', 'Unknown')}")
        print(f"   Size: {size / 1024 if size else 0:.1f} KB")
        print(f"   Path: {export.get('path', 'N/A')}")
        print()

    print(f"Total: {len(exports)} export(s)")
    return 0


def cmd_cleanup_exports(args, config: dict) -> int:
    """Handle cleanup-exports command."""
    removed = _export_manager(config).cleanup_old_exports(retention_days=args.days)
    print(f"Removed {removed} export(s) older than {args.days} day(s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edgefav",
        description="Edit Microsoft Edge managed favourites and export them for Intune or macOS",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('--interactive', '-i', action='store_true',
                        help='Run the interactive editor')
    parser.add_argument('--gui', action='store_true',
                        help='Run the desktop editor')
    parser.add_argument('--config-wizard', action='store_true',
                        help='Run configuration wizard')
    parser.add_argument('--config', default=str(DEFAULT_CONFIG_FILE),
                        help='Configuration file (default: config.json)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Show command
    show_parser = subparsers.add_parser('show', help='Print the favourites in a policy file')
    show_parser.add_argument('file', help='Windows policy (.json) or macOS profile (.mobileconfig)')
    show_parser.add_argument('--from', dest='from_format', choices=FORMATS,
                             help='Input format (default: detect)')

    # JSON command
    json_parser = subparsers.add_parser('json', help='Print the favourites JSON of a policy file')
    json_parser.add_argument('file', help='Windows policy (.json) or macOS profile (.mobileconfig)')
    json_parser.add_argument('--from', dest='from_format', choices=FORMATS,
                             help='Input format (default: detect)')

    # Convert command
    convert_parser = subparsers.add_parser('convert', help='Convert a policy file to another format')
    convert_parser.add_argument('file', help='File to convert')
    convert_parser.add_argument('--from', dest='from_format', choices=FORMATS,
                                help='Input format (default: detect)')
    convert_parser.add_argument('--to', dest='to_format', choices=FORMATS, required=True,
                                help='Output format')
    convert_parser.add_argument('--output', '-o', help='Output file (default: export directory)')
    convert_parser.add_argument('--root-label', help='Override the top-level folder name')

    # List exports command
    list_parser = subparsers.add_parser('list-exports', help='List exported documents')
    list_parser.add_argument('--format', choices=FORMATS, help='Filter by format')

    # Cleanup command
    cleanup_parser = subparsers.add_parser('cleanup-exports', help='Delete old exported documents')
    cleanup_parser.add_argument('--days', type=int, default=30,
                                help='Keep exports newer than this many days (default: 30)')

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_file = Path(args.config)
    config = load_config(config_file)

    if args.verbose:
        set_log_level(logging.DEBUG)
    elif isinstance(config.get("log_level"), str):
        set_log_level(getattr(logging, config["log_level"].upper(), logging.INFO))

    # Handle special modes
    if args.gui:
        try:
            from edgefav.ui.gui_qt import run_gui
        except ImportError as e:
            logger.error(f"PyQt6 GUI not available: {e}")
            logger.info("Try: pip install 'edgefav[gui]'")
            return 1
        return run_gui(config)

    if args.config_wizard:
        config = interactive_config_wizard()
        if config:
            save_config(config, config_file)
            logger.info(f"Configuration saved to {config_file}")
        return 0

    if args.interactive:
        try:
            run_editor(EditorSession(config))
            return 0
        except (KeyboardInterrupt, EOFError):
            logger.info("\nCancelled by user")
            return 1

    if not args.command:
        parser.print_help()
        return 1

    # Route to command handler
    if args.command == 'show':
        return cmd_show(args, config)
    elif args.command == 'json':
        return cmd_json(args, config)
    elif args.command == 'convert':
        return cmd_convert(args, config)
    elif args.command == 'list-exports':
        return cmd_list_exports(args, config)
    elif args.command == 'cleanup-exports':
        return cmd_cleanup_exports(args, config)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
