"""Custom exceptions for the restaurant ordering application."""

class RestaurantError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="Something went wrong", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class ValidationError(RestaurantError):
    """Raised when a required field is missing or malformed."""
    def __init__(self, message, errors=None):
        super().__init__(message, 400, {'errors': list(errors or [message])})
        self.errors = list(errors or [message])

class NotFoundError(RestaurantError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class UnauthorizedError(RestaurantError):
    """Raised when a user lacks permission for an action."""
    def __init__(self, message="Unauthorized access"):
        super().__init__(message, 403)

class TransportError(RestaurantError):
    """Raised by the RPC client when the network call or the server fails."""
    def __init__(self, message="Something went wrong", status_code=502):
        super().__init__(message, status_code)
