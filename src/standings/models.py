"""Standings data models - team records in, ranked snapshots out."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class TeamRecord:
    """A team's point total as supplied by the record store."""

    id: Any
    name: str
    points: Any  # validated by the builder, never coerced here
    members: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RankedEntry:
    """One row of the standings."""

    team_id: Any
    name: str
    points: int
    rank: int
    previous_rank: Optional[int] = None
    rank_delta: int = 0

    @property
    def is_new_entrant(self) -> bool:
        """True when the team was not in the previous snapshot."""
        return self.previous_rank is None

    def to_wire(self) -> Dict:
        return {
            "teamId": self.team_id,
            "name": self.name,
            "points": self.points,
            "rank": self.rank,
            "rankDelta": self.rank_delta,
        }


@dataclass(frozen=True)
class Snapshot:
    """Immutable, fully ordered result of one refresh cycle."""

    entries: Tuple[RankedEntry, ...] = ()
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[RankedEntry]:
        return iter(self.entries)

    def get(self, team_id: Any) -> Optional[RankedEntry]:
        """Get the entry for a team, or None if it is not ranked."""
        for entry in self.entries:
            if entry.team_id == team_id:
                return entry
        return None

    def ranks_by_team(self) -> Dict[Any, int]:
        """Map team id -> rank."""
        return {entry.team_id: entry.rank for entry in self.entries}

    def leaders(self) -> List[RankedEntry]:
        """All entries sharing first place."""
        return [entry for entry in self.entries if entry.rank == 1]

    def to_wire(self) -> List[Dict]:
        """Ordered list of ``{teamId, name, points, rank, rankDelta}`` rows."""
        return [entry.to_wire() for entry in self.entries]

    def to_dict(self) -> Dict:
        """Full JSON-serializable form, including previous ranks."""
        return {
            "createdAt": self.created_at.isoformat(),
            "entries": [
                {**entry.to_wire(), "previousRank": entry.previous_rank}
                for entry in self.entries
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Snapshot":
        """Reconstruct a Snapshot written by ``to_dict``."""
        entries = tuple(
            RankedEntry(
                team_id=ed["teamId"],
                name=ed["name"],
                points=ed["points"],
                rank=ed["rank"],
                previous_rank=ed.get("previousRank"),
                rank_delta=ed.get("rankDelta", 0),
            )
            for ed in data["entries"]
        )
        return cls(
            entries=entries,
            created_at=datetime.fromisoformat(data["createdAt"]),
        )
