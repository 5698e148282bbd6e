class AppStoreException(Exception):
    pass


class TransactionTimestampParseFailed(AppStoreException):
    def __init__(self, list_name, transaction_id, value):
        self.list_name = list_name
        self.transaction_id = transaction_id
        self.value = value
        super().__init__(list_name, transaction_id, value)

    def __str__(self):
        return (
            f'Failed to parse `expires_date_ms` of `{self.value}` for transaction `{self.transaction_id}`'
            f' in `{self.list_name}`'
        )


class TransactionExpiryOutOfRange(AppStoreException):
    def __init__(self, transaction_id, subscription_expire_at):
        self.transaction_id = transaction_id
        self.subscription_expire_at = subscription_expire_at
        super().__init__(transaction_id, subscription_expire_at)

    def __str__(self):
        return (
            f'Expiry `{self.subscription_expire_at}` of transaction `{self.transaction_id}`'
            ' cannot be represented as a datetime'
        )
