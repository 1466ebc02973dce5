from .exceptions import (
    ValidationException,
    ResourceNotFoundException,
    InsufficientStockException,
    MalformedRecordException,
    InvalidTokenException,
)

__all__ = [
    'ValidationException', 'ResourceNotFoundException', 'InsufficientStockException',
    'MalformedRecordException', 'InvalidTokenException',
]
