"""
Storage Errors

Exceptions raised by the codec, the store and the backend adapters.
"""


class StorageError(Exception):
    """Base class for candle store failures"""


class MalformedRecord(StorageError, ValueError):
    """A stored record could not be decoded (bad base64 or wrong length)"""

    def __init__(self, message: str, record: object = None):
        super().__init__(message)
        self.record = record


class BackendUnavailable(StorageError, ConnectionError):
    """The key-value backend could not be reached; never retried here"""
