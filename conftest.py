# Ensure project root is on sys.path so 'ircclient' and 'tests.fixtures' are
# importable when running pytest without an editable install.
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.resolve()
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def plain_log_output(monkeypatch):
    """Keep log rendering deterministic regardless of the caller's DEBUG setting."""
    monkeypatch.delenv("DEBUG", raising=False)
    yield
