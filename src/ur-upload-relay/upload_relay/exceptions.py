class BadRequestError(Exception):
    """Raised when an inbound upload request cannot be parsed.

    The message is returned to the caller verbatim as the body of a
    400 response.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
