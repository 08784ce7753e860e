"""
Standardized exception hierarchy for the bodymind engine
Provides rich context, consistent logging, and user-friendly error messages

Range violations (health below 0, experience reversed below 0) are clamped by
the engine and never raised. Weight validation failures are returned as
per-field lists by the weights manager instead of being raised.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class BodyMindError(Exception):
    """
    Base exception for all bodymind errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise BodyMindError(
            message="Failed to recompute daily score",
            user_id="user-1",
            operation="recompute_day",
            context={"date": "2025-01-15"}
        )
    """

    # Expected, caller-caused errors override this with WARNING
    log_level: int = logging.ERROR

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # 'message' is reserved by logging
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.log(self.log_level, f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.log(self.log_level, f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (caller input)
# ==========================================

class ValidationError(BodyMindError):
    """
    Raised when caller input fails validation

    Examples:
    - Negative experience handed to the level calculator's callers
    - Habit stack with fewer than two activities
    - Malformed cue time

    Example:
        raise ValidationError(
            message="A habit stack must have at least 2 activities",
            field="activities",
            value=["training"],
            user_id="user-1"
        )
    """

    log_level = logging.WARNING

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Conflicts
# ==========================================

class ConflictError(BodyMindError):
    """The request conflicts with existing state"""

    log_level = logging.WARNING


class DuplicateCompletionError(ConflictError):
    """A habit already has a completion on this calendar day"""

    def __init__(
        self,
        habit_id: str,
        local_date: Any,
        **kwargs
    ):
        self.habit_id = habit_id
        self.local_date = local_date
        super().__init__(
            message=f"Habit {habit_id} already completed on {local_date}",
            user_message="You already completed this habit today.",
            context={"habit_id": habit_id, "date": str(local_date)},
            **kwargs
        )


# ==========================================
# Missing records
# ==========================================

class RecordNotFoundError(BodyMindError):
    """Requested record does not exist"""

    log_level = logging.WARNING

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


class CompletionNotFoundError(RecordNotFoundError):
    """Completion event to delete does not exist for this user"""

    def __init__(self, event_id: str, **kwargs):
        super().__init__(
            message=f"Completion not found: {event_id}",
            record_type="Completion",
            record_id=event_id,
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(BodyMindError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )
