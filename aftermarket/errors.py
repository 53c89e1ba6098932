class AfterMarketError(Exception):
    """Base class for errors raised by the aftermarket package."""


class InvalidRecordError(AfterMarketError):
    """A record cannot be stored as given (bad symbol, percentage or date)."""


class DuplicateRecordError(AfterMarketError):
    """A record with the same (symbol, date) already exists."""


class ScrapeError(AfterMarketError):
    """The after-hours page could not be fetched or did not have the expected layout."""


class StorageError(AfterMarketError):
    """The database could not be reached or rejected a statement."""
