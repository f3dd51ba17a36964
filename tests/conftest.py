import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parent.parent))

from sortedseq.config import get_settings


# Settings are cached per process; make every test start from a clean
# environment so SORTEDSEQ_* variables set by one test do not leak.
@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for key in [
        "SORTEDSEQ_MIN_CAPACITY",
        "SORTEDSEQ_GROWTH_FACTOR",
        "SORTEDSEQ_LOG_LEVEL",
        "SORTEDSEQ_GROWTH_ALERT_THRESHOLD",
    ]:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
