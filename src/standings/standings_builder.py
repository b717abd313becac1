"""Standings builder - turns raw team records into a ranked snapshot.

Ranking rules:
- Order by points descending, then team name ascending, then team id
  (as text) so equal teams never swap places between refreshes.
- Standard competition ranking: tied teams share a rank and the next
  distinct score skips the tied places (1, 1, 3, 4, ...).
- Rank delta is ``previous_rank - rank`` for teams ranked in the previous
  snapshot; first appearances get no previous rank and a zero delta.

The builder is pure. A batch with any malformed record is rejected whole.
"""

import logging
import numbers
from datetime import datetime, timezone
from typing import Optional, Sequence

import pandas as pd

from src.standings.exceptions import DuplicateTeamId, InvalidRecord
from src.standings.models import RankedEntry, Snapshot, TeamRecord

logger = logging.getLogger(__name__)


def _validate_records(records: Sequence[TeamRecord]) -> None:
    """Reject malformed points/names and duplicate ids."""
    seen = set()
    for record in records:
        points = record.points
        if isinstance(points, bool) or not isinstance(points, numbers.Integral):
            raise InvalidRecord(
                f"Team {record.id!r} has non-integer points: {points!r}"
            )
        if points < 0:
            raise InvalidRecord(
                f"Team {record.id!r} has negative points: {points}"
            )
        if not isinstance(record.name, str):
            raise InvalidRecord(
                f"Team {record.id!r} has a non-string name: {record.name!r}"
            )

        try:
            duplicate = record.id in seen
        except TypeError as e:
            raise InvalidRecord(f"Team id {record.id!r} is not hashable") from e
        if duplicate:
            raise DuplicateTeamId(f"Duplicate team id: {record.id!r}")
        seen.add(record.id)


def build(
    records: Sequence[TeamRecord],
    previous: Optional[Snapshot] = None,
    created_at: Optional[datetime] = None,
) -> Snapshot:
    """Build a ranked snapshot from team records.

    Args:
        records: Current team records (may be empty).
        previous: The last published snapshot, used for rank deltas.
        created_at: Snapshot timestamp. Defaults to now (UTC).

    Returns:
        A new Snapshot sorted by rank.

    Raises:
        InvalidRecord: A record has negative/non-integer points or a
            non-string name.
        DuplicateTeamId: Two records share a team id.
    """
    if created_at is None:
        created_at = datetime.now(timezone.utc)

    records = list(records)
    _validate_records(records)

    if not records:
        logger.debug("No team records; building empty snapshot")
        return Snapshot(entries=(), created_at=created_at)

    # Row index is the position in ``records`` so ids never pass through pandas
    df = pd.DataFrame(
        {
            "name": [r.name for r in records],
            "points": [int(r.points) for r in records],
            "id_key": [str(r.id) for r in records],
        }
    )
    df["rank"] = (
        df["points"].rank(method="min", ascending=False).astype(int)
    )
    df = df.sort_values(
        ["points", "name", "id_key"],
        ascending=[False, True, True],
        kind="mergesort",
    )

    previous_ranks = previous.ranks_by_team() if previous is not None else {}

    entries = []
    for pos, row in zip(df.index, df.itertuples(index=False)):
        record = records[pos]
        rank = int(row.rank)
        previous_rank = previous_ranks.get(record.id)
        delta = previous_rank - rank if previous_rank is not None else 0
        entries.append(
            RankedEntry(
                team_id=record.id,
                name=record.name,
                points=int(row.points),
                rank=rank,
                previous_rank=previous_rank,
                rank_delta=delta,
            )
        )

    logger.debug(
        "Ranked %d teams (%d new since previous snapshot)",
        len(entries),
        sum(1 for e in entries if e.is_new_entrant),
    )
    return Snapshot(entries=tuple(entries), created_at=created_at)
