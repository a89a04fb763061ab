"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class CatalogError(DomainException):
    """Account catalog is missing, malformed, or has duplicate tier ids"""

    pass
