"""Exceptions raised by model-search."""


class ModelSearchError(RuntimeError):
    """Base class for model-search failures."""


class ConfigurationError(ModelSearchError):
    """Required configuration is missing; not recoverable by retrying."""


class SearchRequestError(ModelSearchError):
    """The search backend could not be reached or rejected the request."""
