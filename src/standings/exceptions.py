"""Error types raised by the standings engine."""


class StandingsError(Exception):
    """Base class for all standings engine errors."""


class InvalidRecord(StandingsError):
    """Raised when a team record carries a malformed name or point value."""


class DuplicateTeamId(StandingsError):
    """Raised when two records in one batch share a team id."""


class FetchError(StandingsError):
    """Raised when the record source is unreachable or returns bad data."""


class RefreshFailed(StandingsError):
    """Raised by a refresh that did not publish a new snapshot.

    The underlying error is available as ``cause`` (and as ``__cause__``).
    """

    def __init__(self, cause: Exception):
        super().__init__(f"Refresh failed: {cause}")
        self.cause = cause
