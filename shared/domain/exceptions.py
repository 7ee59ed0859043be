"""Base exception for errors that are part of a domain's contract."""


class DomainError(Exception):
    """
    Expected, caller-facing failure

    ``code`` is a stable identifier for the failure kind; ``details``
    carries the identifiers a caller needs to retry or escalate.
    """

    code = 'domain_error'
    retryable = False

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            'error': self.code,
            'message': self.message,
            'retryable': self.retryable,
            'details': {
                key: (str(value) if value is not None else None)
                for key, value in self.details.items()
            },
        }
