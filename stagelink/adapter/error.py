"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderError(AdapterError):
    """External provider returned something we cannot use."""

    pass


class ReputationLookupError(AdapterError):
    """IP reputation service failed or returned no verdict."""

    pass
