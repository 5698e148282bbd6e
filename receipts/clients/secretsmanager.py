import json
import os

import boto3

APPSTORE_PARAMS_NAME = os.environ.get('SECRETSMANAGER_APPSTORE_PARAMS_NAME')


class SecretsManagerClient:
    def __init__(self, appstore_params_name=APPSTORE_PARAMS_NAME):
        self.boto_client = boto3.client('secretsmanager')
        self.exceptions = self.boto_client.exceptions
        self.appstore_params_name = appstore_params_name

    def get_appstore_params(self):
        if not hasattr(self, '_appstore_params'):
            resp = self.boto_client.get_secret_value(SecretId=self.appstore_params_name)
            self._appstore_params = json.loads(resp['SecretString'])
        return self._appstore_params
