"""Exception root for Docflow."""


class DocflowError(Exception):
    """Base exception for all Docflow errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
