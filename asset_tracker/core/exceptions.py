"""
Exception types raised by the alerting and analytics core
"""


class AssetTrackerError(Exception):
    """Base class for asset tracker errors"""


class DataAccessError(AssetTrackerError):
    """A fetch or insert against the data store failed"""


class MalformedRecordError(AssetTrackerError):
    """A device or log record cannot be evaluated"""

    def __init__(self, message: str, record_id=None):
        super().__init__(message)
        self.record_id = record_id


class InvalidActionError(AssetTrackerError):
    """The requested action name is not known"""

    def __init__(self, action):
        super().__init__(f"Invalid action: {action!r}")
        self.action = action
