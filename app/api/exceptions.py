class InputError(Exception):
    """Raised when a request body is malformed or misses required fields."""
