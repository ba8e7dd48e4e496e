"""Main CLI entry-point."""
from __future__ import annotations

import argparse
import asyncio
import shutil
import sys

from core.logging.config import bootstrap_logging, shutdown_logging
from config import settings

_BRIGHT_GREEN = "\033[1;92m"
_CYAN = "\033[96m"
_YELLOW = "\033[93m"
_RESET = "\033[0m"
_BOLD = "\033[1m"


def _g(s: str) -> str:
    return f"{_BRIGHT_GREEN}{s}{_RESET}"


def _c(s: str) -> str:
    return f"{_CYAN}{s}{_RESET}"


def _print_header() -> None:
    cols = shutil.get_terminal_size(fallback=(100, 20)).columns
    div = "═" * min(cols, 64)
    print(_g(div))
    print(_g("  RANKED ROSTER TRACKER"))
    print(_c(f"  {len(settings.TRACKED_PUUIDS)} players · {settings.PLATFORM} · season from {settings.SEASON_START}"))
    print(_g(div))


def _run(command: str) -> int:
    # Lazy imports keep `--help` fast and avoid loading uvicorn for the CLI
    from presentation.cli import CacheCheckCommand, RefreshCommand, ServeCommand

    if command == "serve":
        return ServeCommand().run()
    if command == "refresh":
        return asyncio.run(RefreshCommand().run())
    if command == "cache-check":
        return CacheCheckCommand().run()
    raise ValueError(f"unknown command {command!r}")


def _menu() -> int:
    _print_header()
    while True:
        cols = shutil.get_terminal_size(fallback=(96, 20)).columns
        print(f"\n{_g('═' * min(cols, 48))}")
        print(f"  {_BOLD}MAIN MENU{_RESET}")
        print(_g("═" * min(cols, 48)))
        print(f"  {_c('1')}  Serve API")
        print(f"  {_c('2')}  Refresh all players now")
        print(f"  {_c('3')}  Cache check")
        print(f"  {_c('4')}  Exit")
        print(_g("─" * min(cols, 48)))
        choice = input("  Choose: ").strip()

        if choice == "1":
            return _run("serve")
        elif choice == "2":
            _run("refresh")
        elif choice == "3":
            _run("cache-check")
        elif choice == "4":
            print(f"\n  {_g('Goodbye!')}\n")
            return 0
        else:
            print(f"  {_YELLOW}Invalid option.{_RESET}")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="roster-tracker", description="Ranked roster stats service")
    parser.add_argument(
        "command",
        nargs="?",
        choices=["serve", "refresh", "cache-check"],
        help="run one command; omit for the interactive menu",
    )
    return parser


def main(argv: list[str]) -> int:
    args = _parser().parse_args(argv)
    settings.create_directories()
    bootstrap_logging(
        service=args.command or "tracker",
        level=settings.LOG_LEVEL,
        log_dir=settings.LOG_DIR,
        log_file_name="tracker.jsonl",
    )
    try:
        if args.command:
            return _run(args.command)
        return _menu()
    finally:
        shutdown_logging()


def cli() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(cli())
