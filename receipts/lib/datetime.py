"""
Parse timestamps as apple sends them in verifyReceipt responses.

Apple sends epoch timestamps as strings of milliseconds, ie `expires_date_ms`.
In python runtime (outside of this lib) they are carried as integer epoch seconds.
"""

import re

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

ms_re = re.compile(r'[+-]?[0-9]+')


def ms_to_unix(ms_str):
    "Convert a string of epoch milliseconds to integer epoch seconds. Raises ValueError on bad input."
    # int() alone would also accept whitespace and underscores
    if not isinstance(ms_str, str) or not ms_re.fullmatch(ms_str):
        raise ValueError(f'Invalid millisecond timestamp: `{ms_str}`')
    ms = int(ms_str)
    if not INT64_MIN <= ms <= INT64_MAX:
        raise ValueError(f'Millisecond timestamp out of range: `{ms_str}`')
    # floor, so pre-epoch values round towards the past
    return ms // 1000
