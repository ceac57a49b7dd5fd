import json

import pytest

from config import InsightConfig
from tests.helpers import FakeClient, make_response


@pytest.fixture
def settings():
    return InsightConfig(api_key="test-key")


@pytest.fixture
def fake_client():
    return FakeClient(json.dumps(make_response()))
