"""Refresh the leaderboard once, or keep polling on a timer.

Usage:
    python -m src.standings.run_refresh SOURCE [interval] [cycles]

SOURCE is an http(s) URL of the teams endpoint, or a .json / .csv file.

Examples:
    python -m src.standings.run_refresh http://localhost:5000/user/get-all-teams
    python -m src.standings.run_refresh data/teams.csv 30
    python -m src.standings.run_refresh data/teams.json 5 10
"""

import logging
import sys
import time
from pathlib import Path
from typing import Callable, List, Optional

from src.logging_config import setup_logging
from src.standings.exceptions import RefreshFailed
from src.standings.models import Snapshot
from src.standings.record_source import open_record_source
from src.standings.refresh_coordinator import RefreshCoordinator
from src.standings.snapshot_persistence import SnapshotPersistence

logger = logging.getLogger(__name__)


def _format_change(delta: int) -> str:
    if delta > 0:
        return f"+{delta}"
    if delta < 0:
        return str(delta)
    return ""


def format_standings(snapshot: Optional[Snapshot]) -> str:
    """Render standings as a plain-text table."""
    if snapshot is None or len(snapshot) == 0:
        return "No teams found."

    name_width = max(4, max(len(e.name) for e in snapshot))
    lines = [
        f"{'Rank':>4}  {'Chg':>4}  {'Team':<{name_width}}  {'Points':>6}",
        "-" * (4 + 2 + 4 + 2 + name_width + 2 + 6),
    ]
    for entry in snapshot:
        lines.append(
            f"{entry.rank:>4}  {_format_change(entry.rank_delta):>4}  "
            f"{entry.name:<{name_width}}  {entry.points:>6}"
        )
    lines.append(
        f"Last updated: {snapshot.created_at.astimezone().strftime('%H:%M:%S')}"
    )
    return "\n".join(lines)


def build_coordinator(
    source_location: str,
    storage_dir: Optional[Path] = None,
) -> RefreshCoordinator:
    """Create a coordinator for *source_location*, restoring saved standings."""
    source = open_record_source(source_location)
    persistence = SnapshotPersistence(storage_dir)
    return RefreshCoordinator(
        fetch_records=source,
        initial_snapshot=persistence.load_snapshot(),
        on_publish=persistence.save_snapshot,
    )


def run_refresh(
    source_location: str,
    interval: Optional[float] = None,
    cycles: Optional[int] = None,
    storage_dir: Optional[Path] = None,
    sleep: Callable[[float], None] = time.sleep,
    out: Callable[[str], None] = print,
) -> Optional[Snapshot]:
    """Run one refresh, or poll every *interval* seconds.

    Args:
        source_location: URL or file path of the team records.
        interval: Seconds between refreshes. None refreshes once.
        cycles: Stop after this many polling cycles. None polls forever.
        storage_dir: Where the latest standings are kept.
            Defaults to ``data/standings/``.

    Returns:
        The latest published snapshot.

    Raises:
        RefreshFailed: Only in single-refresh mode. While polling, failures
            are reported and the last good standings stay on screen.
    """
    coordinator = build_coordinator(source_location, storage_dir)

    if interval is None:
        snapshot = coordinator.refresh()
        out(format_standings(snapshot))
        return snapshot

    logger.info(
        "Polling %s every %ss (%s cycles)",
        source_location,
        interval,
        cycles if cycles is not None else "unlimited",
    )
    cycle = 0
    while cycles is None or cycle < cycles:
        cycle += 1
        try:
            coordinator.refresh()
        except RefreshFailed as e:
            out(f"Error: {e.cause}")
        out(format_standings(coordinator.get_latest_snapshot()))

        if cycles is None or cycle < cycles:
            sleep(interval)

    return coordinator.get_latest_snapshot()


def main(argv: List[str]) -> int:
    """Command-line entry point. Returns the process exit code."""
    if not argv:
        print(__doc__)
        return 2

    try:
        interval = float(argv[1]) if len(argv) > 1 else None
        cycles = int(argv[2]) if len(argv) > 2 else None
        run_refresh(argv[0], interval, cycles)
    except KeyboardInterrupt:
        logger.info("Polling stopped")
    except ValueError as e:
        logger.error("Invalid arguments: %s", e)
        print(__doc__)
        return 1
    except RefreshFailed:
        logger.exception("Refresh failed")
        return 1
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(main(sys.argv[1:]))
