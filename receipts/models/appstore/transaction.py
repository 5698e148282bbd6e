import pendulum

from receipts.lib.datetime import ms_to_unix

from .exceptions import TransactionExpiryOutOfRange, TransactionTimestampParseFailed


class Transaction:
    "One purchase or subscription renewal found in a receipt"

    def __init__(self, id, in_app_name, subscription_expire_at=0):
        self.id = id
        self.in_app_name = in_app_name
        # unix timestamp, 0 if not a subscription
        self.subscription_expire_at = subscription_expire_at

    def __eq__(self, other):
        if not isinstance(other, Transaction):
            return NotImplemented
        return self.serialize() == other.serialize()

    def __repr__(self):
        return (
            f'Transaction(id={self.id!r}, in_app_name={self.in_app_name!r}, '
            f'subscription_expire_at={self.subscription_expire_at!r})'
        )

    @property
    def expires_at(self):
        "Raises TransactionExpiryOutOfRange for timestamps beyond what datetime supports"
        if not self.subscription_expire_at:
            return None
        try:
            return pendulum.from_timestamp(self.subscription_expire_at, tz='utc')
        except (ValueError, OverflowError, OSError) as err:
            raise TransactionExpiryOutOfRange(self.id, self.subscription_expire_at) from err

    def serialize(self):
        return {
            'transactionId': self.id,
            'productId': self.in_app_name,
            'subscriptionExpireAt': self.subscription_expire_at,
        }


def collect_transactions(resp_body):
    """
    Reduce apple's verifyReceipt response body to transactions unique by transaction id.

    `latest_receipt_info` is processed first, then `receipt.in_app`. Where a transaction id
    appears more than once, the last record seen wins. Order of the result is not meaningful.
    """
    unique = {}
    for list_name, records in (
        ('latest_receipt_info', resp_body.get('latest_receipt_info') or []),
        ('receipt.in_app', (resp_body.get('receipt') or {}).get('in_app') or []),
    ):
        for record in records:
            transaction_id = record.get('transaction_id') or ''
            expires_ms = record.get('expires_date_ms') or ''
            expires = 0
            if expires_ms:
                try:
                    expires = ms_to_unix(expires_ms)
                except ValueError as err:
                    raise TransactionTimestampParseFailed(list_name, transaction_id, expires_ms) from err
            unique[transaction_id] = Transaction(
                id=transaction_id,
                in_app_name=record.get('product_id') or '',
                subscription_expire_at=expires,
            )
    return list(unique.values())
