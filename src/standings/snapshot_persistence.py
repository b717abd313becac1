"""Snapshot persistence - save and load the latest standings as JSON."""

import json
import logging
from pathlib import Path
from typing import Optional

from src.standings.config import SNAPSHOT_DIR, SNAPSHOT_FILENAME
from src.standings.models import Snapshot

logger = logging.getLogger(__name__)


class SnapshotPersistence:
    """Keeps exactly one standings file: the latest published snapshot.

    The file holds the full snapshot (for restoring rank deltas after a
    restart) next to the display rows a consumer can read directly.
    """

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = storage_dir or SNAPSHOT_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    @property
    def filepath(self) -> Path:
        return self.storage_dir / SNAPSHOT_FILENAME

    def save_snapshot(self, snapshot: Snapshot) -> Path:
        """Write the snapshot, replacing any previous one.

        Returns:
            Path to the saved file.
        """
        data = {
            "snapshot": snapshot.to_dict(),
            "standings": snapshot.to_wire(),
        }

        # Write then rename so readers never see a half-written file
        tmp_path = self.filepath.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)
        tmp_path.replace(self.filepath)

        logger.info(
            "Saved standings (%d teams, %s) to %s",
            len(snapshot),
            snapshot.created_at.isoformat(),
            self.filepath,
        )
        return self.filepath

    def load_snapshot(self) -> Optional[Snapshot]:
        """Load the saved snapshot.

        Returns:
            Snapshot if a readable file exists, None otherwise.
        """
        if not self.filepath.exists():
            return None

        try:
            with open(self.filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            snapshot = Snapshot.from_dict(data["snapshot"])
        except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError) as e:
            logger.warning("Corrupt standings file %s: %s", self.filepath, e)
            return None

        logger.info("Loaded standings (%d teams) from %s", len(snapshot), self.filepath)
        return snapshot

    def delete_snapshot(self) -> bool:
        """Delete the saved snapshot.

        Returns:
            True if deleted, False if there was nothing to delete.
        """
        if not self.filepath.exists():
            return False

        self.filepath.unlink()
        logger.info("Deleted standings file %s", self.filepath)
        return True
