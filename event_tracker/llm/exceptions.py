"""Custom exceptions for the language-model client."""


class LLMError(Exception):
    """Base exception for all language-model errors.

    A search query failing with any LLMError is skipped; an extraction
    failing with any LLMError ends the scan.
    """

    pass


class LLMHTTPError(LLMError):
    """The API answered with a non-success status, or the transport failed.

    ``status_code`` is 0 when no response was received.
    """

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class LLMTimeoutError(LLMError):
    """The API call did not complete within the configured timeout."""

    pass


class LLMResponseError(LLMError):
    """The API answered with a body that is not JSON."""

    pass


class ExtractionParseError(LLMError):
    """The extraction reply could not be parsed as JSON."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text
