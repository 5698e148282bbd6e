import json
import logging

from receipts import clients, models
from receipts.clients.appstore import AppStoreProviderRejected
from receipts.logging import LogLevelContext, handler_logging

logger = logging.getLogger()

secrets_manager_client = clients.SecretsManagerClient()
appstore_client = clients.AppStoreClient(secrets_manager_client.get_appstore_params)
clients = {
    'appstore': appstore_client,
}

managers = {}
appstore_manager = managers.get('appstore') or models.AppStoreManager(clients, managers=managers)


def response(status_code, body):
    return {
        'statusCode': status_code,
        'body': json.dumps(body),
    }


@handler_logging(event_to_extras=lambda event: {'event': event})
def verify_receipt(event, context):
    with LogLevelContext(logger, logging.INFO):
        logger.info('verify_receipt() called')

    try:
        body = json.loads(event.get('body') or '{}')
    except ValueError:
        return response(400, {'message': 'Request body is not valid json'})
    if not isinstance(body, dict):
        return response(400, {'message': 'Request body must be a json object'})

    receipt_data = body.get('receiptData')
    shared_secret = body.get('sharedSecret')
    if not isinstance(receipt_data, str):
        return response(400, {'message': 'Field `receiptData` is required'})
    if shared_secret is not None and not isinstance(shared_secret, str):
        return response(400, {'message': 'Field `sharedSecret` must be a string'})

    try:
        transactions = appstore_manager.get_transactions(receipt_data, shared_secret=shared_secret)
    except AppStoreProviderRejected as err:
        with LogLevelContext(logger, logging.INFO):
            logger.info(f'AppStore rejected receipt with status `{err}`')
        return response(400, {'message': str(err), 'status': err.status, 'description': err.description})

    transactions = sorted(transactions, key=lambda t: t.id)
    return response(200, {'transactions': [t.serialize() for t in transactions]})
