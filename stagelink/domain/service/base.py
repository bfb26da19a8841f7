"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold identity and access logic that does not belong to
    a single entity.
    """

    pass
