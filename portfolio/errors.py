"""Exception classes raised by the portfolio services."""


class PortfolioError(Exception):
    """
    Base exception for request-level failures.

    `status_code` is the HTTP status reported to the caller and
    `public_message` is the only text that leaves the server.
    """

    status_code = 500
    public_message = "Internal server error"

    def to_public_message(self) -> str:
        return self.public_message


class ValidationError(PortfolioError):
    """
    Raised when required request fields are missing or empty.
    """

    status_code = 400

    def to_public_message(self) -> str:
        return str(self) or "Invalid request"


class NotFoundError(PortfolioError):
    """
    Raised when a named file does not exist in storage.
    """

    status_code = 404
    public_message = "File not found"


class StorageError(PortfolioError):
    """
    Raised when reading, writing or deleting on the filesystem fails.
    """

    public_message = "Storage error"


class ParseError(StorageError):
    """
    Raised when a stored JSON document cannot be decoded.
    """


class MailError(PortfolioError):
    """
    Raised when the mail sender fails to deliver a message.
    """

    public_message = "Error sending email"
