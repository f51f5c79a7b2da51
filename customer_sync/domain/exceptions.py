"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class CustomerCreationError(DomainException):
    """Remote API refused to create the customer; carries the remote message"""

    pass


class PaymentSourceError(DomainException):
    """Attach call succeeded but returned no source id"""

    def __init__(self, message: str = "Unable to add payment source."):
        super().__init__(message)
