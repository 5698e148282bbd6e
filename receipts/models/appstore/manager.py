import logging

from .transaction import collect_transactions

logger = logging.getLogger()


class AppStoreManager:
    def __init__(self, clients, managers=None):
        managers = managers or {}
        managers['appstore'] = self

        self.clients = clients
        if 'appstore' in clients:
            self.appstore_client = self.clients['appstore']

    def get_transactions(self, receipt_data_b64, shared_secret=None):
        "Verify the receipt with apple and return the unique transactions it contains"
        # purposely letting any app store client exceptions propogate up to the caller
        resp_body = self.appstore_client.verify_receipt(receipt_data_b64, shared_secret=shared_secret)
        transactions = collect_transactions(resp_body)
        logger.debug(
            f'AppStore receipt verified with {len(transactions)} transactions',
            extra={'environment': resp_body.get('environment')},
        )
        return transactions
