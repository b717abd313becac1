from src.standings.exceptions import (
    DuplicateTeamId,
    FetchError,
    InvalidRecord,
    RefreshFailed,
    StandingsError,
)
from src.standings.models import RankedEntry, Snapshot, TeamRecord
from src.standings.record_source import (
    CsvRecordSource,
    HttpRecordSource,
    JsonFileRecordSource,
    RecordSource,
    open_record_source,
    parse_teams_payload,
)
from src.standings.refresh_coordinator import RefreshCoordinator
from src.standings.snapshot_persistence import SnapshotPersistence
from src.standings.standings_builder import build

__all__ = [
    "CsvRecordSource",
    "DuplicateTeamId",
    "FetchError",
    "HttpRecordSource",
    "InvalidRecord",
    "JsonFileRecordSource",
    "RankedEntry",
    "RecordSource",
    "RefreshCoordinator",
    "RefreshFailed",
    "Snapshot",
    "SnapshotPersistence",
    "StandingsError",
    "TeamRecord",
    "build",
    "open_record_source",
    "parse_teams_payload",
]
