import datetime
import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

# Monday 2026-03-16, 08:00 local
FIXED_NOW = datetime.datetime(2026, 3, 16, 8, 0)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def today() -> datetime.date:
    return FIXED_NOW.date()
