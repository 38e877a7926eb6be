"""Environment-variable-based configuration for guided-lift."""

import os
from pathlib import Path

# Default data directory (repo-root/data, like the database path always was)
_DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"

DATA_DIR: Path = Path(
    os.environ.get("GUIDED_LIFT_DATA_DIR", str(_DEFAULT_DATA_DIR))
).expanduser()
LOG_LEVEL: str = os.environ.get("GUIDED_LIFT_LOG_LEVEL", "WARNING").upper()
DEFAULT_REST_TIME: int = int(os.environ.get("GUIDED_LIFT_DEFAULT_REST", "60"))
WEIGHT_UNIT: str = os.environ.get("GUIDED_LIFT_WEIGHT_UNIT", "kg")
