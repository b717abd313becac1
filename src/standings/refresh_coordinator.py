"""Refresh coordinator - sequences refreshes and owns the published snapshot."""

import logging
import threading
from typing import Callable, Optional, Sequence

from src.standings import standings_builder
from src.standings.exceptions import FetchError, RefreshFailed
from src.standings.models import Snapshot, TeamRecord

logger = logging.getLogger(__name__)

FetchRecords = Callable[[], Sequence[TeamRecord]]


class RefreshCoordinator:
    """Holds the latest standings snapshot and replaces it on refresh.

    One instance per process, passed explicitly to whatever serves
    requests. Refreshes are serialized, so the snapshot used for rank
    deltas is always the one published immediately before. A failed
    refresh leaves the last good snapshot in place.
    """

    UNINITIALIZED = "uninitialized"
    LIVE = "live"

    def __init__(
        self,
        fetch_records: Optional[FetchRecords] = None,
        initial_snapshot: Optional[Snapshot] = None,
        on_publish: Optional[Callable[[Snapshot], None]] = None,
    ):
        self.fetch_records = fetch_records
        self.on_publish = on_publish
        self._last_snapshot = initial_snapshot
        self._lock = threading.Lock()
        self.last_error: Optional[RefreshFailed] = None
        self.refresh_count = 0
        self.failure_count = 0

    @property
    def state(self) -> str:
        """UNINITIALIZED until a snapshot has been published, then LIVE."""
        return self.UNINITIALIZED if self._last_snapshot is None else self.LIVE

    def get_latest_snapshot(self) -> Optional[Snapshot]:
        """The last published snapshot, or None before the first one."""
        return self._last_snapshot

    def refresh(self, fetch_records: Optional[FetchRecords] = None) -> Snapshot:
        """Fetch records, rank them and publish the new snapshot.

        Args:
            fetch_records: Record capability for this call. Defaults to the
                one given at construction.

        Returns:
            The newly published Snapshot.

        Raises:
            RefreshFailed: If fetching or ranking failed. The previously
                published snapshot is left unchanged.
        """
        fetch = fetch_records or self.fetch_records

        with self._lock:
            try:
                if fetch is None:
                    raise FetchError("No record source configured")
                records = fetch()
                snapshot = standings_builder.build(records, self._last_snapshot)
            except Exception as e:
                self.failure_count += 1
                self.last_error = RefreshFailed(e)
                logger.warning("Refresh failed, keeping last standings: %s", e)
                raise self.last_error from e

            self._last_snapshot = snapshot
            self.refresh_count += 1
            self.last_error = None

            leaders = ", ".join(entry.name for entry in snapshot.leaders())
            logger.info(
                "Published standings #%d: %d teams, leader(s): %s",
                self.refresh_count,
                len(snapshot),
                leaders or "-",
            )

            # Runs under the lock so callbacks see snapshots in publish order
            if self.on_publish is not None:
                try:
                    self.on_publish(snapshot)
                except Exception:
                    logger.exception("Snapshot publish callback failed")

        return snapshot
