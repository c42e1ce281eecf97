#!/usr/bin/env python3
"""
Forum Tools - Main Entry Point
Run forum tools from the command line.

Usage:
    python main.py --list                         # List enabled tools
    python main.py forocoches_thread --args '{"url": "https://forocoches.com/foro/showthread.php?t=123"}'
    python main.py mediavida_search --args '{"subforum": "dev", "query": "python"}'
    python main.py forocoches_quotes --args '{"url": "..."}' --verbose

The tool's text result goes to stdout; logs go to stderr and the
diagnostic log file. Exit code is 1 when the tool reports an error.
"""

import sys
import json
import argparse
from pathlib import Path

# Ensure we can import from project root
sys.path.insert(0, str(Path(__file__).parent))

import config
from core.logger import setup_logging, log_header, log_config, log_error


def log_startup(verbose: bool) -> None:
    """Print the active configuration."""
    if not verbose:
        return
    log_header(f"{config.PROJECT_NAME} v{config.VERSION}")
    log_config("Data directory", str(config.DATA_DIR))
    log_config("Forocoches", "enabled" if config.FOROCOCHES_ENABLED else "disabled")
    log_config("Cookies", str(config.FOROCOCHES_COOKIES_PATH), indent=1)
    log_config("Mediavida", "enabled" if config.MEDIAVIDA_ENABLED else "disabled")
    log_config("Cookies", str(config.MEDIAVIDA_COOKIES_PATH), indent=1)
    log_config("Page delay", f"{config.FORUM_PAGE_DELAY_SECONDS}s")


def list_tools() -> int:
    from tools.definitions import get_tool_definitions

    for tool in get_tool_definitions():
        summary = tool["description"].splitlines()[0]
        required = ", ".join(tool["input_schema"].get("required", []))
        print(f"{tool['name']} ({required}): {summary}")
    return 0


def run_tool(tool_name: str, raw_args: str) -> int:
    """
    Execute one tool and print its result.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        tool_input = json.loads(raw_args) if raw_args else {}
    except json.JSONDecodeError as e:
        log_error(f"--args is not valid JSON: {e}")
        return 2
    if not isinstance(tool_input, dict):
        log_error("--args must be a JSON object")
        return 2

    from tools.executor import get_tool_executor

    executor = get_tool_executor()
    try:
        result = executor.execute(tool_name, tool_input, tool_use_id="cli")
    finally:
        executor.close()

    print(result.content)
    return 1 if result.is_error else 0


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description=f"{config.PROJECT_NAME} - read and post on Spanish forums",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "tool",
        nargs="?",
        help="Name of the tool to run"
    )
    parser.add_argument(
        "--args", "-a",
        default="",
        help="Tool arguments as a JSON object"
    )
    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List enabled tools and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print configuration before running"
    )
    args = parser.parse_args()

    config.DATA_DIR.mkdir(parents=True, exist_ok=True)
    setup_logging(
        log_file_path=config.DIAGNOSTIC_LOG_PATH,
        level=config.LOG_LEVEL,
        log_to_file=config.LOG_TO_FILE,
    )
    log_startup(args.verbose)

    if args.list:
        return list_tools()

    if not args.tool:
        parser.print_help()
        return 2

    return run_tool(args.tool, args.args)


if __name__ == "__main__":
    sys.exit(main())
