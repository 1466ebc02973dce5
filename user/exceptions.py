class ValidationException(Exception):
    pass

class ResourceNotFoundException(Exception):
    pass

class InsufficientStockException(Exception):
    def __init__(self, product_name, available, requested):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}, requested: {requested}"
        )

class MalformedRecordException(Exception):
    pass

class InvalidTokenException(Exception):
    pass
