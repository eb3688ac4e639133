class ProjectionError(Exception):
    """Base class for errors raised by the projection engine."""


class InvalidRuleError(ProjectionError, ValueError):
    """A recurrence definition that can never be enumerated."""


class EnumerationOverrunError(ProjectionError):
    """The enumerator exceeded its step bound or failed to advance.

    Always a logic defect; results are never silently truncated.
    """


class DataFetchError(ProjectionError):
    """The data store failed to answer a query."""
