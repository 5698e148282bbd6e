from unittest import mock

import pytest

from receipts.clients.appstore import URL_PRODUCTION, URL_SANDBOX, AppStoreProviderRejected
from receipts.models import AppStoreManager
from receipts.models.appstore import Transaction
from receipts.models.appstore.exceptions import TransactionTimestampParseFailed


def test_manager_registers_itself(appstore_client):
    other = object()
    managers = {'other': other}
    manager = AppStoreManager({'appstore': appstore_client}, managers=managers)
    assert managers == {'other': other, 'appstore': manager}
    assert manager.appstore_client is appstore_client


def test_get_transactions_passes_through_to_client(mocked_appstore_manager):
    client = mocked_appstore_manager.appstore_client
    client.verify_receipt.return_value = {
        'status': 0,
        'latest_receipt_info': [{'transaction_id': 'A', 'product_id': 'p1', 'expires_date_ms': '1700000000000'}],
    }
    transactions = mocked_appstore_manager.get_transactions('receipt-data', 'the-secret')
    assert transactions == [Transaction('A', 'p1', 1700000000)]
    assert client.verify_receipt.mock_calls == [mock.call('receipt-data', shared_secret='the-secret')]


def test_get_transactions_sandbox_scenario(appstore_manager, requests_mock):
    requests_mock.post(URL_PRODUCTION, json={'status': 21007})
    requests_mock.post(
        URL_SANDBOX,
        json={
            'status': 0,
            'environment': 'Sandbox',
            'latest_receipt_info': [
                {'transaction_id': 'A', 'product_id': 'p1', 'expires_date_ms': '1700000000000'},
            ],
            'receipt': {'in_app': [{'transaction_id': 'A', 'product_id': 'p1', 'expires_date_ms': ''}]},
        },
    )

    transactions = appstore_manager.get_transactions('receipt-data')
    assert transactions == [Transaction('A', 'p1', 0)]
    assert len(requests_mock.request_history) == 2
    assert requests_mock.request_history[1].json() == {
        'receipt-data': 'receipt-data',
        'password': 'configured-secret',
    }


def test_get_transactions_rejected(appstore_manager, requests_mock):
    requests_mock.post(URL_PRODUCTION, json={'status': 21003})
    with pytest.raises(AppStoreProviderRejected, match='^21003$'):
        appstore_manager.get_transactions('receipt-data')


def test_get_transactions_bad_timestamp_no_partial_result(appstore_manager, requests_mock):
    requests_mock.post(
        URL_PRODUCTION,
        json={
            'status': 0,
            'latest_receipt_info': [{'transaction_id': 'A', 'product_id': 'p1', 'expires_date_ms': '1000'}],
            'receipt': {'in_app': [{'transaction_id': 'B', 'product_id': 'p1', 'expires_date_ms': 'not-a-number'}]},
        },
    )
    with pytest.raises(TransactionTimestampParseFailed, match='receipt.in_app'):
        appstore_manager.get_transactions('receipt-data')
