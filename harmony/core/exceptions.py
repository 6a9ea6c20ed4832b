"""
Custom Exception Hierarchy
Domain errors raised by the storage layer and services
"""


class DomainException(Exception):
    """Base exception for all domain errors"""
    pass


class StorageException(DomainException):
    """Database operation failed"""
    pass


class ResourceNotFoundException(DomainException):
    """Requested resource not found"""

    def __init__(self, resource_type: str, identifier):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class DuplicateResourceException(DomainException):
    """Resource already exists"""

    def __init__(self, resource_type: str, field: str, value):
        self.resource_type = resource_type
        self.field = field
        self.value = value
        super().__init__(f"{resource_type} with {field}='{value}' already exists")
