import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault('APP_ENV', 'test')
os.environ.setdefault('CACHE_BACKEND', 'memory')
os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('GITHUB_TOKEN', 'test-token')

from actions_indicators.schemas.workflow import RepoKey  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def repo() -> RepoKey:
    return RepoKey(owner='octo-org', name='octo-repo')


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc))
