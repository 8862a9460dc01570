"""Custom exceptions for lazytree."""


class LazyTreeError(Exception):
    """Base exception for lazytree operations."""


class FetchError(LazyTreeError):
    """Error while fetching records from the data source."""


class RateLimitError(FetchError):
    """Rate limited by the data source."""


class NotFoundError(LazyTreeError):
    """Node id is not present in the forest."""


class DuplicateIdError(LazyTreeError):
    """Fetched record id already exists elsewhere in the forest."""


class InvalidRecordError(LazyTreeError):
    """Record cannot be turned into a tree node."""
