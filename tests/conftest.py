import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import
from tests.util.local_time import utc_local_time  # noqa: E402


@pytest.fixture(autouse=True)
def _utc_local_time() -> Iterator[None]:
    """Pin local time to UTC so time-of-day assertions do not depend on the host."""

    with utc_local_time():
        yield


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "tui: Textual app tests")
