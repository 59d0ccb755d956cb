class NodeException(Exception):
    """
    Base class of node errors.

    Attributes:
        recoverable (bool): Whether running the node again may succeed.
    """

    def __init__(self, message: str | None = None, recoverable: bool = False):
        super().__init__(message)
        self.recoverable = recoverable


class NodeFailedException(NodeException):
    pass


class MissingCredentialsException(NodeFailedException):
    """No usable credential is configured for the node."""


class MissingCapabilityException(NodeFailedException):
    """The execution context lacks the request helpers the node needs."""


class ModelListException(NodeFailedException):
    """
    The provider model catalog could not be listed.

    Attributes:
        cause (Exception | None): The underlying transport or response error.
    """

    def __init__(self, message: str | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class NoTextInResponseException(NodeFailedException):
    """
    The provider response carries no text.

    Attributes:
        code (str): Machine readable error code.
        description (str | None): Hint shown to the workflow author.
    """

    code = "NO_TEXT_IN_RESPONSE"

    def __init__(self, message: str = "No text in response", description: str | None = None):
        super().__init__(message, recoverable=True)
        self.description = description

    def __str__(self) -> str:
        if self.description:
            return f"{super().__str__()}: {self.description}"
        return super().__str__()


class NotSupportedException(NodeFailedException):
    """The selected resource or operation is declared but not implemented."""
