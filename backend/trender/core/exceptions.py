"""
Domain exceptions

Every failure the ingestion pipeline can surface derives from TrenderError
"""


class TrenderError(Exception):
    """Base class for application errors"""


class ConfigError(TrenderError):
    """Storage connection string is missing or malformed"""


class FetchError(TrenderError):
    """The remote feed could not be fetched or had an unexpected shape"""


class EmptyFeedError(TrenderError):
    """The remote feed returned no items"""


class ItemProcessingError(TrenderError):
    """A single feed item could not be turned into a card"""

    def __init__(self, message: str, external_id=None):
        super().__init__(message)
        self.external_id = external_id


class TransactionError(TrenderError):
    """The ingestion transaction failed and was rolled back"""
