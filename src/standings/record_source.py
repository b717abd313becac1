"""Record sources - fetch raw team records for the refresh coordinator.

Every source exposes ``fetch_records()`` and is itself callable, so an
instance can be passed straight to ``RefreshCoordinator``. Any failure to
obtain or understand the records surfaces as ``FetchError``.

Point values are handed over as read; rejecting bad ones is the builder's
job. CSV point cells are read as text and only whole-number text is
converted to int. Names and ids are stripped of surrounding whitespace.
"""

import json
import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import requests

from src.standings.config import (
    CSV_REQUIRED_COLUMNS,
    DEFAULT_TEAMS_ENDPOINT,
    HTTP_TIMEOUT_SECONDS,
    MEMBER_FIELDS,
)
from src.standings.exceptions import FetchError
from src.standings.models import TeamRecord

logger = logging.getLogger(__name__)

_ID_KEYS = ("_id", "id", "teamId")
_NAME_KEYS = ("team_name", "name")
_INTEGER_CELL = re.compile(r"^-?\d+$")


def _first_present(raw: Dict, keys) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _parse_team(raw: Any, index: int) -> TeamRecord:
    """Convert one raw team object into a TeamRecord."""
    if not isinstance(raw, dict):
        raise FetchError(f"Team #{index} is not an object: {raw!r}")

    team_id = _first_present(raw, _ID_KEYS)
    if team_id is None:
        raise FetchError(f"Team #{index} has no id")

    name = _first_present(raw, _NAME_KEYS)
    if name is None:
        raise FetchError(f"Team {team_id!r} has no name")
    if isinstance(name, str):
        name = name.strip()
    if isinstance(team_id, str):
        team_id = team_id.strip()

    if isinstance(raw.get("members"), list):
        members = tuple(str(m) for m in raw["members"] if m)
    else:
        members = tuple(str(raw[f]) for f in MEMBER_FIELDS if raw.get(f))

    # The store defaults missing points to 0
    points = raw.get("points", 0)

    return TeamRecord(id=team_id, name=name, points=points, members=members)


def parse_teams_payload(payload: Any) -> List[TeamRecord]:
    """Parse a ``{"teams": [...]}`` body (or a bare list of teams).

    Raises:
        FetchError: If the payload does not have the expected shape.
    """
    if isinstance(payload, dict):
        if "teams" not in payload:
            raise FetchError("Payload has no 'teams' key")
        teams = payload["teams"]
    else:
        teams = payload

    if not isinstance(teams, list):
        raise FetchError(
            f"Expected a list of teams, got {type(teams).__name__}"
        )

    return [_parse_team(raw, i) for i, raw in enumerate(teams)]


def _parse_points(value):
    """Turn a whole-number point cell into an int; blank cells become None.

    Anything else ("10.0", "12.5", "ten") is passed on unchanged.
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    if isinstance(value, str) and _INTEGER_CELL.match(value.strip()):
        return int(value.strip())
    return value


class RecordSource:
    """Abstract base for callable record sources.

    Subclasses implement ``fetch_records``; calling the instance runs it.
    """

    def fetch_records(self) -> List[TeamRecord]:
        raise NotImplementedError

    def __call__(self) -> List[TeamRecord]:
        return self.fetch_records()


class JsonFileRecordSource(RecordSource):
    """Reads teams from a JSON file holding the backend's payload."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def fetch_records(self) -> List[TeamRecord]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except OSError as e:
            raise FetchError(f"Cannot read {self.path}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FetchError(f"Corrupt team file {self.path}: {e}") from e

        records = parse_teams_payload(payload)
        logger.debug("Read %d teams from %s", len(records), self.path.name)
        return records


class CsvRecordSource(RecordSource):
    """Reads teams from a CSV export.

    Expected columns: team_id, team_name, points and optionally
    team_member1..team_member3.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def fetch_records(self) -> List[TeamRecord]:
        try:
            df = pd.read_csv(
                self.path,
                dtype={"team_id": str, "team_name": str, "points": str},
                quotechar='"',
            )
        except (
            OSError,
            UnicodeDecodeError,
            pd.errors.ParserError,
            pd.errors.EmptyDataError,
        ) as e:
            raise FetchError(f"Cannot read {self.path}: {e}") from e

        df.columns = [str(c).strip() for c in df.columns]
        missing = set(CSV_REQUIRED_COLUMNS) - set(df.columns)
        if missing:
            raise FetchError(
                f"{self.path.name} is missing columns: {sorted(missing)}"
            )

        # Skip fully blank rows
        df = df.dropna(how="all").reset_index(drop=True)
        if df["team_id"].isna().any() or df["team_name"].isna().any():
            raise FetchError(f"{self.path.name} has rows without id or name")

        member_cols = [c for c in MEMBER_FIELDS if c in df.columns]
        records = []
        for _, row in df.iterrows():
            members = tuple(
                str(row[c]).strip() for c in member_cols if pd.notna(row[c])
            )
            records.append(
                TeamRecord(
                    id=row["team_id"].strip(),
                    name=row["team_name"].strip(),
                    points=_parse_points(row["points"]),
                    members=members,
                )
            )

        logger.debug("Read %d teams from %s", len(records), self.path.name)
        return records


class HttpRecordSource(RecordSource):
    """Fetches teams from the backend's ``GET /user/get-all-teams`` route.

    The backend answers 404 when it has no teams; that is an empty list,
    not a failure.
    """

    def __init__(
        self,
        url: str = DEFAULT_TEAMS_ENDPOINT,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_records(self) -> List[TeamRecord]:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Request to {self.url} failed: {e}") from e

        if response.status_code == 404:
            logger.info("No teams found at %s", self.url)
            return []

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise FetchError(
                f"{self.url} returned HTTP {response.status_code}"
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"{self.url} returned a non-JSON body") from e

        return parse_teams_payload(payload)


def open_record_source(location: str) -> RecordSource:
    """Pick a record source for a URL or a .json/.csv path."""
    if location.startswith(("http://", "https://")):
        return HttpRecordSource(location)

    path = Path(location)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return CsvRecordSource(path)
    if suffix == ".json":
        return JsonFileRecordSource(path)
    raise ValueError(
        f"Unsupported record source '{location}'. "
        "Use an http(s) URL, a .json file or a .csv file."
    )
