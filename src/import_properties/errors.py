"""Exceptions raised by the property import pipeline."""


class FeedImportError(Exception):
    """Base class for import pipeline errors."""


class FeedUnavailable(FeedImportError):
    """The feed could not be retrieved. Fatal for the run."""


class MalformedFeed(FeedImportError):
    """The feed document does not have the expected structure. Fatal for the run."""


class PersistError(FeedImportError):
    """Writing a property to the store failed. Fatal for the record only."""

    def __init__(self, reference: str, message: str) -> None:
        super().__init__(f"{reference}: {message}")
        self.reference = reference
