"""Entry point for python -m focusbar."""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .errors import FocusbarError
from .service import STORE_FILENAME
from .settings import SettingsStore
from .stats import StatsRecorder
from .store import JsonStore

console = Console()
logger = logging.getLogger("focusbar")

DEFAULT_DATA_DIR = "~/.focusbar"


def default_data_dir() -> Path:
    return Path(os.environ.get("FOCUSBAR_HOME", DEFAULT_DATA_DIR)).expanduser()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="focusbar",
        description="Pomodoro timer with a daily task planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  Space    Start/Pause
  s        Stop (pause)
  r        Reset to a fresh work phase
  n        Skip to next phase
  t        Cycle the active task
  q        Quit

Examples:
  focusbar                    # Run with saved settings
  focusbar --work 50          # 50-minute pomodoros (saved)
  focusbar --no-auto-break    # Stay idle when work ends (saved)
  focusbar --stats            # Print daily statistics
""",
    )

    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding store.json (default: $FOCUSBAR_HOME or ~/.focusbar)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print daily statistics and exit",
    )

    # Durations
    parser.add_argument("--work", type=int, metavar="MINS", help="Work phase duration in minutes")
    parser.add_argument("--short", type=int, metavar="MINS", help="Short break duration in minutes")
    parser.add_argument("--long", type=int, metavar="MINS", help="Long break duration in minutes")
    parser.add_argument("--cycle", type=int, metavar="N", help="Work phases before long break")

    # Auto behavior
    parser.add_argument(
        "--auto-break",
        action="store_true",
        default=None,
        dest="auto_break",
        help="Auto-start breaks when work ends",
    )
    parser.add_argument(
        "--no-auto-break",
        action="store_false",
        dest="auto_break",
        help="Don't auto-start breaks",
    )
    parser.add_argument(
        "--auto-work",
        action="store_true",
        default=None,
        dest="auto_work",
        help="Auto-start work when break ends",
    )
    parser.add_argument(
        "--no-auto-work",
        action="store_false",
        dest="auto_work",
        help="Don't auto-start work phases",
    )

    # Sound
    parser.add_argument(
        "--sound",
        action="store_true",
        default=None,
        dest="sound",
        help="Play the alarm chime at phase boundaries",
    )
    parser.add_argument(
        "--no-sound",
        action="store_false",
        dest="sound",
        help="Silent notifications, no chime",
    )

    return parser.parse_args(argv)


def settings_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Settings changes requested on the command line."""
    changes: Dict[str, Any] = {}
    for arg, name in (
        ("work", "work_duration"),
        ("short", "short_break_duration"),
        ("long", "long_break_duration"),
    ):
        mins = getattr(args, arg)
        if mins is not None:
            changes[name] = mins * 60
    if args.cycle is not None:
        changes["cycles_before_long_break"] = args.cycle
    if args.auto_break is not None:
        changes["auto_start_breaks"] = args.auto_break
    if args.auto_work is not None:
        changes["auto_start_pomodoros"] = args.auto_work
    if args.sound is not None:
        changes["sound_enabled"] = args.sound
    return changes


def setup_logging(level: str, tui: bool) -> None:
    """Send logs to the textual devtools while the UI runs, else to the console."""
    if tui:
        from textual.logging import TextualHandler

        handler: logging.Handler = TextualHandler()
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def print_stats(recorder: StatsRecorder) -> None:
    """Print a table of completed pomodoros per day."""
    stats = recorder.get_stats()
    if not stats:
        console.print("[dim]No completed pomodoros yet.[/]")
        return

    table = Table(title="Focus sessions", box=box.ROUNDED)
    table.add_column("Date")
    table.add_column("Pomodoros", justify="right")
    table.add_column("Minutes", justify="right")
    for date in sorted(stats, reverse=True):
        rec = stats[date]
        table.add_row(date, str(rec.completed_pomodoros), f"{rec.total_work_minutes:g}")
    console.print(table)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level, tui=not args.stats)
    data_dir = args.data_dir or default_data_dir()

    try:
        store = JsonStore(Path(data_dir).expanduser() / STORE_FILENAME)
        settings = SettingsStore(store)
        changes = settings_overrides(args)
        if changes:
            settings.update(**changes)
            logger.info("Saved settings: %s", changes)
        # Stored values may have been edited by hand.
        settings.get()

        if args.stats:
            print_stats(StatsRecorder(store))
            return 0

        from .ui import run_ui

        run_ui(store)
    except FocusbarError as exc:
        console.print(f"[bold red]ERROR:[/] {exc}")
        return 1
    except KeyboardInterrupt:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
