"""
Errors raised by creator-xp

Every error carries the creator it concerns, the engine operation that
failed and a request id, and is logged once when it is constructed.
Catalog problems surface as ConfigurationError subclasses; bad caller
input as ValidationError; store lookups as StoreError.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class CreatorXPError(Exception):
    """
    Base exception for all creator-xp errors

    Holds the failing creator (user_id), the engine call (operation) and
    free-form context such as the award tag or level number. `message` is
    for logs; `user_message` is safe to show the creator.

    Example:
        raise CreatorXPError(
            message="Progress record could not be saved after award",
            user_id="creator-42",
            operation="award",
            context={"source": "viral_post", "amount": 40}
        )
    """

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
        self.user_message = user_message or "Your progress could not be updated. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Logged once, at construction
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
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Error payload for callers (replay output, service responses)"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (Caller Input)
# ==========================================

class ValidationError(CreatorXPError):
    """
    Raised when caller input fails validation

    Examples:
    - Negative XP award
    - Viral score outside 0-100
    - Unknown stats field

    Example:
        raise ValidationError(
            message="Amount must be non-negative",
            field="amount",
            value=-5,
            user_id="creator-42"
        )
    """

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
# Configuration Errors
# ==========================================

class ConfigurationError(CreatorXPError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        context = {"config_key": config_key, **(kwargs.pop("context", None) or {})}
        super().__init__(
            message=message,
            user_message="Level and achievement settings are unavailable. Please contact support.",
            context=context,
            **kwargs
        )


class CatalogError(ConfigurationError):
    """Level or achievement catalog is malformed"""

    def __init__(self, message: str, catalog: Optional[str] = None, **kwargs):
        self.catalog = catalog
        super().__init__(message=message, config_key=catalog, **kwargs)


# ==========================================
# Storage Errors
# ==========================================

class StoreError(CreatorXPError):
    """
    Base class for progress store errors
    """
    pass


class RecordNotFoundError(StoreError):
    """Requested progress record does not exist"""

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
