from typing import Optional, Any

class InspireBotError(Exception):
    """
    Base exception for InspireBot application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(InspireBotError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class AuthenticationError(InspireBotError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ConfigurationError(InspireBotError):
    """
    Raised when required configuration or secrets cannot be loaded.
    """
    def __init__(self, message: str = "Configuration error", details: Optional[Any] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500, details=details)

class InvalidTransitionError(InspireBotError):
    """
    Raised when a subscription record cannot move to the requested state.
    """
    def __init__(self, message: str = "Invalid state transition", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_TRANSITION", status_code=409, details=details)

class ReplyTimeoutError(InspireBotError):
    """
    Raised when a user does not reply within the wait window.
    """
    def __init__(self, message: str = "No reply received in time", details: Optional[Any] = None):
        super().__init__(message, code="TIMEOUT", status_code=408, details=details)

class ExternalServiceError(InspireBotError):
    """
    Raised when an external service (e.g., SNS, Twilio, MongoDB) fails.
    """
    def __init__(self, message: str = "External service error", code: str = "EXTERNAL_SERVICE_ERROR", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=502, details=details)

class SourceUnavailableError(ExternalServiceError):
    """
    Raised when the quote source cannot produce a quote.
    """
    def __init__(self, message: str = "Quote source unavailable", details: Optional[Any] = None):
        super().__init__(message, code="SOURCE_UNAVAILABLE", details=details)

class DeliveryRejectedError(ExternalServiceError):
    """
    Raised when SNS rejects a publish or subscribe call.
    """
    def __init__(self, message: str = "Delivery rejected", details: Optional[Any] = None):
        super().__init__(message, code="DELIVERY_REJECTED", details=details)

class StoreUnavailableError(ExternalServiceError):
    """
    Raised when the subscription store cannot be read or written.
    """
    def __init__(self, message: str = "Subscription store unavailable", details: Optional[Any] = None):
        super().__init__(message, code="STORE_UNAVAILABLE", details=details)

class ChatDeliveryError(ExternalServiceError):
    """
    Raised when a chat message cannot be delivered.
    """
    def __init__(self, message: str = "Chat delivery failed", details: Optional[Any] = None):
        super().__init__(message, code="CHAT_DELIVERY_FAILED", details=details)
