from . import exceptions
from .manager import AppStoreManager
from .transaction import Transaction, collect_transactions

__all__ = [
    'AppStoreManager',
    'Transaction',
    'collect_transactions',
    'exceptions',
]
