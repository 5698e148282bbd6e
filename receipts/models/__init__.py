__all__ = [
    'AppStoreManager',
]
from .appstore import AppStoreManager
