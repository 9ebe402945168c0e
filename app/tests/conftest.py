import sys
from pathlib import Path

import pytest

# Add the project root to sys.path so that "app" module can be found
# structure: <root>/app/tests/conftest.py

current_dir = Path(__file__).parent.absolute()
root_dir = current_dir.parent.parent
sys.path.insert(0, str(root_dir))


@pytest.fixture(autouse=True)
def clean_scoring_env(monkeypatch):
    """Tests run against the default weights unless they set their own."""
    for name in (
        "RECOMMENDATION_WEIGHT_AVAILABILITY",
        "RECOMMENDATION_WEIGHT_DISTANCE",
        "RECOMMENDATION_WEIGHT_RATING",
        "DEFAULT_SERVICE_RADIUS_MILES",
        "DEFAULT_RECOMMENDATION_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)
