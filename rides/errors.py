class ValidationError(Exception):
    """
    Raised synchronously to the caller when a ride operation is not allowed.
    Nothing has been written when this is raised.
    """
    pass


class RideNotFound(ValidationError):
    pass
