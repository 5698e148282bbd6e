import os
from unittest import mock

import pytest

# boto3 clients are built at import time of the handler modules, and need a region to do so
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')

from receipts import clients, models  # noqa: E402


@pytest.fixture
def appstore_client():
    yield clients.AppStoreClient(lambda: {'sharedSecret': 'configured-secret'})


@pytest.fixture
def appstore_manager(appstore_client):
    yield models.AppStoreManager({'appstore': appstore_client})


@pytest.fixture
def mocked_appstore_manager():
    yield models.AppStoreManager({'appstore': mock.Mock(clients.AppStoreClient())})
