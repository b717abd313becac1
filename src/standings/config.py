from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
SNAPSHOT_DIR = DATA_DIR / "standings"
SNAPSHOT_FILENAME = "standings_latest.json"

# Record source defaults
DEFAULT_TEAMS_ENDPOINT = "http://localhost:5000/user/get-all-teams"
HTTP_TIMEOUT_SECONDS = 10

# Team record fields as stored by the backend
MEMBER_FIELDS = ("team_member1", "team_member2", "team_member3")
CSV_REQUIRED_COLUMNS = ("team_id", "team_name", "points")

# Keys (in order) of one standings row sent to a display consumer
WIRE_FIELDS = ("teamId", "name", "points", "rank", "rankDelta")
