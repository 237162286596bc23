"""Errors raised by the warehouse model and its document store."""


class StockroomError(Exception):
    """Base class for warehouse model errors."""


class NotFoundError(StockroomError):
    """A document path or identifier does not resolve."""

    def __init__(self, path: str):
        super().__init__(f"Not found: {path}")
        self.path = path


class InvalidStateError(StockroomError):
    """An operation was attempted on a node in the wrong load state."""


class StoreError(StockroomError):
    """The document store failed to serve a request."""


class StageConflictError(StoreError):
    """A commit batch was rejected by the document store."""


class PartialLoadError(StockroomError):
    """
    Some subtrees failed to load.
    
    ``failures`` holds ``(path, exception)`` pairs, one per subtree that was left
    flat. Every other subtree loaded normally.
    """

    def __init__(self, failures):
        self.failures = list(failures)
        paths = ", ".join(path for path, _ in self.failures)
        super().__init__(f"Failed to load children of: {paths}")
