import functools
import json
import logging


def handler_logging(func=None, event_to_extras=None):
    "Handler decorator to configure logging, usable both bare and with arguments"
    if func is None:
        return functools.partial(handler_logging, event_to_extras=event_to_extras)

    # lambda already sets a handler for us
    # https://gist.github.com/alanjds/000b15f7dcd43d7646aab34fcd3cef8c#file-awslambda-bootstrap-py-L463
    logger = logging.getLogger()
    for log_handler in logger.handlers:
        log_handler.setFormatter(CloudWatchFormatter())

    @functools.wraps(func)
    def wrapper(event, context):
        try:
            return func(event, context)
        except Exception as err:
            # Logging the exception ourselves gets it to CloudWatch as our json object, and then
            # re-raising it ensures an error is returned to the client and the 'Errors' metric fires
            extra = event_to_extras(event) if event_to_extras else None
            logger.exception(str(err), extra=extra)
            raise err

    return wrapper


# https://docs.python.org/3/howto/logging-cookbook.html#using-a-context-manager-for-selective-logging
class LogLevelContext:
    def __init__(self, logger, level):
        self.logger = logger
        self.level = level

    def __enter__(self):
        self.old_level = self.logger.level
        self.logger.setLevel(self.level)

    def __exit__(self, et, ev, tb):
        self.logger.setLevel(self.old_level)


class CloudWatchFormatter(logging.Formatter):
    "Format logging records so they json and readable in CloudWatch"

    extras = ('client', 'environment', 'event')

    def format(self, record):
        # clear away the lamba path prefix
        prefix = '/var/task/'
        start = len(prefix) if record.pathname.startswith(prefix) else 0
        path = record.pathname[start:]

        # lambda adds the request_id to all log records. Fail softly so this
        # formatter can still be used outside the lambda exe context
        request_id = getattr(record, 'aws_request_id', None)

        # Placing `message` first in the data dict makes the first part of it visible in the CloudWatch summary table
        data = {
            'message': record.getMessage(),
            'level': record.levelname,
            'requestId': request_id,
            'sourceFile': path,
            'sourceLine': record.lineno,
        }

        for extra in self.extras:
            if hasattr(record, extra):
                data[extra] = getattr(record, extra)

        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
            data['exceptionInfo'] = record.exc_text.split('\n')
        if record.stack_info:
            data['stackInfo'] = record.stack_info.split('\n')
        return f'{record.levelname} RequestId: {request_id} Data: {json.dumps(data, default=str)}'
