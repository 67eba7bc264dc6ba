"""Error taxonomy for NetOps AI Core

Every error here is recoverable by the caller. The vulnerability store keeps
serving its last good snapshot on ``FeedUnavailable``, the AI client lets the
rest propagate, and the dispatcher turns all of them into a degraded verdict.
"""

from typing import Optional


class AICoreError(Exception):
    """Base class for all NetOps AI Core errors"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class MissingConfiguration(AICoreError):
    """A setting required by the watsonx client is not configured"""


class NoCredentialsConfigured(MissingConfiguration):
    """No watsonx API keys are configured"""


class TokenExchangeFailed(AICoreError):
    """IAM token exchange failed"""

    def __init__(self, message: str, status: Optional[int] = None,
                 cause: Optional[BaseException] = None):
        self.status = status
        super().__init__(message, cause)


class FeedUnavailable(AICoreError):
    """The vulnerability feed could not be fetched"""

    def __init__(self, message: str, status: Optional[int] = None,
                 cause: Optional[BaseException] = None):
        self.status = status
        super().__init__(message, cause)


class ModelUnavailable(AICoreError):
    """The generation endpoint failed or returned a non-success status"""

    def __init__(self, message: str, status: Optional[int] = None,
                 cause: Optional[BaseException] = None):
        self.status = status
        super().__init__(message, cause)


class EmptyModelOutput(AICoreError):
    """The generation response carried no generated text"""


class InvalidEvent(AICoreError, ValueError):
    """An inbound event payload is missing required fields"""
