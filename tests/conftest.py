from datetime import datetime, timezone

import pytest

from intermodal import Manifest
from payloads import FIXTURES

CPU_BLOB = (
    '{"manifest":{"domain":"example.org","scope":"metrics","kind":"cpu","version":1,'
    '"origin":"host-03","ctime":"2020-08-25T14:41:40Z","labels":{"foo":"bar"}},'
    '"payload":{"interval_seconds":10,"idle_percent":[80,81,85,90,91,92]}}'
)


@pytest.fixture
def cpu_blob() -> str:
    return CPU_BLOB


@pytest.fixture
def manifest() -> Manifest:
    return Manifest(
        domain="example.org",
        scope="metrics",
        kind="cpu",
        version=1,
        origin="host-03",
        ctime=datetime(2020, 8, 25, 14, 41, 40, 123456, tzinfo=timezone.utc),
        labels={"foo": "bar"},
    )


@pytest.fixture
def fixtures_dir():
    return FIXTURES
