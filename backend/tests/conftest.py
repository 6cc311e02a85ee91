import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
HANDLER = ROOT / "handler"
if str(HANDLER) not in sys.path:
    sys.path.insert(0, str(HANDLER))

from schedule_overrides.api import OverridesApi  # noqa: E402
from schedule_overrides.settings import Settings  # noqa: E402
from schedule_overrides.store import InMemoryBlobStore  # noqa: E402

ADMIN_KEY = "s3cret"


@pytest.fixture()
def store():
    return InMemoryBlobStore()


@pytest.fixture()
def settings():
    return Settings(admin_key=ADMIN_KEY, table_name="test-table")


@pytest.fixture()
def api(settings, store):
    return OverridesApi(settings, store)


@pytest.fixture()
def make_event():
    def _make(method="GET", query=None, body=None, headers=None, admin=False):
        headers = dict(headers or {})
        if admin:
            headers["x-admin-key"] = ADMIN_KEY
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        return {
            "httpMethod": method,
            "path": "/overrides",
            "headers": headers,
            "queryStringParameters": query,
            "body": body,
        }

    return _make
