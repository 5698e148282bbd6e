# https://developer.apple.com/documentation/appstorereceipts
import logging

import requests

logger = logging.getLogger()

URL_PRODUCTION = 'https://buy.itunes.apple.com/verifyReceipt'
URL_SANDBOX = 'https://sandbox.itunes.apple.com/verifyReceipt'

# https://developer.apple.com/documentation/appstorereceipts/status
STATUS_OK = 0
STATUS_SANDBOX_RECEIPT = 21007

STATUS_DESCRIPTIONS = {
    21000: 'The request to the App Store was not made using the HTTP POST request method',
    21002: 'The data in the receipt-data property was malformed or the service experienced a temporary issue',
    21003: 'The receipt could not be authenticated',
    21004: 'The shared secret you provided does not match the shared secret on file for your account',
    21005: 'The receipt server was temporarily unable to provide the receipt',
    21006: 'This receipt is valid but the subscription has expired',
    21007: 'This receipt is from the test environment, but it was sent to the production environment',
    21008: 'This receipt is from the production environment, but it was sent to the test environment',
    21009: 'Internal data access error',
    21010: 'The user account cannot be found or has been deleted',
}


class AppStoreClientException(Exception):
    pass


class AppStoreRequestFailed(AppStoreClientException):
    def __init__(self, url):
        self.url = url
        super().__init__(url)

    def __str__(self):
        return f'AppStore `{self.url}` failed during request'


class AppStoreDecodeFailed(AppStoreClientException):
    def __init__(self, url, reason=None):
        self.url = url
        self.reason = reason
        super().__init__(url, reason)

    def __str__(self):
        msg = f'AppStore `{self.url}` response failed during decode'
        return f'{msg}: {self.reason}' if self.reason else msg


class AppStoreProviderRejected(AppStoreClientException):
    "str() of this exception is exactly the decimal status code apple responded with"

    def __init__(self, status):
        self.status = status
        super().__init__(status)

    def __str__(self):
        return str(self.status)

    @property
    def description(self):
        if 21100 <= self.status <= 21199:
            return STATUS_DESCRIPTIONS[21009]
        return STATUS_DESCRIPTIONS.get(self.status)


class AppStoreClient:
    def __init__(self, appstore_params_getter=None):
        self.appstore_params_getter = appstore_params_getter
        self.url_production = URL_PRODUCTION
        self.url_sandbox = URL_SANDBOX

    @property
    def shared_secret(self):
        if not self.appstore_params_getter:
            return None
        if not hasattr(self, '_appstore_params'):
            self._appstore_params = self.appstore_params_getter()
        return self._appstore_params.get('sharedSecret')

    def verify_receipt(self, receipt_data_b64, shared_secret=None):
        """
        Verify the receipt with apple and return apple's decoded response body.

        If `shared_secret` is None, the configured one (if any) is used. An empty
        shared secret is left out of the request entirely.

        Raises AppStoreProviderRejected if apple responds with any non-zero status.
        """
        if shared_secret is None:
            shared_secret = self.shared_secret
        req_body = {'receipt-data': receipt_data_b64}
        if shared_secret:
            req_body['password'] = shared_secret

        # per Apple recommendation, we first attempt to validate with production
        # and then attempt with sandbox only upon receiving a 21007 status code from production
        # https://developer.apple.com/documentation/appstorereceipts/verifyreceipt#discussion
        resp_body = self.do_appstore_post(self.url_production, req_body)
        if resp_body['status'] == STATUS_SANDBOX_RECEIPT:
            logger.warning('AppStore redirected receipt to sandbox', extra={'client': 'appstore'})
            resp_body = self.do_appstore_post(self.url_sandbox, req_body)

        # a sandbox response of 21007 is not retried again
        if resp_body['status'] != STATUS_OK:
            raise AppStoreProviderRejected(resp_body['status'])
        return resp_body

    def do_appstore_post(self, url, req_body):
        try:
            resp = requests.post(url, json=req_body)
            resp.raise_for_status()
        except requests.exceptions.RequestException as err:
            raise AppStoreRequestFailed(url) from err

        try:
            resp_body = resp.json()
        except ValueError as err:
            raise AppStoreDecodeFailed(url) from err
        self.check_response_shape(url, resp_body)
        return resp_body

    def check_response_shape(self, url, resp_body):
        "Raise AppStoreDecodeFailed if the fields we depend on are not of the expected types"
        if not isinstance(resp_body, dict):
            raise AppStoreDecodeFailed(url, 'response body is not an object')
        # bool is a subclass of int, but never a valid status
        status = resp_body.get('status')
        if not isinstance(status, int) or isinstance(status, bool):
            raise AppStoreDecodeFailed(url, f'`status` is not an integer: `{status}`')

        receipt = resp_body.get('receipt')
        if receipt is None:
            receipt = {}
        if not isinstance(receipt, dict):
            raise AppStoreDecodeFailed(url, '`receipt` is not an object')
        for name, records in (
            ('latest_receipt_info', resp_body.get('latest_receipt_info')),
            ('receipt.in_app', receipt.get('in_app')),
        ):
            if records is None:
                continue
            if not isinstance(records, list):
                raise AppStoreDecodeFailed(url, f'`{name}` is not a list')
            for record in records:
                if not isinstance(record, dict):
                    raise AppStoreDecodeFailed(url, f'`{name}` contains a non-object')
                for field in ('transaction_id', 'product_id', 'expires_date_ms'):
                    value = record.get(field)
                    if value is not None and not isinstance(value, str):
                        raise AppStoreDecodeFailed(url, f'`{name}` has a non-string `{field}`')
