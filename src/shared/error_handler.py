"""
Centralized error handling utilities for consistent error management across services.
"""
from functools import wraps
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy.exc import (
    DatabaseError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)

from src.shared.exceptions import ConflictException, ServiceUnavailableException
from src.shared.utils import get_logger


class ServiceError(Exception):
    """Base service error with context"""
    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        super().__init__(self.message)


class ErrorHandler:
    """Centralized error handler for services"""

    def __init__(self, logger_name: str):
        self.logger = get_logger(logger_name)

    def handle_database_error(self, error: Exception, operation: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Handle database-related errors with proper logging and exceptions"""
        context = context or {}

        if isinstance(error, (OperationalError, InterfaceError, DisconnectionError)):
            self.logger.error(f"Catalog store unavailable during {operation}: {str(error)}", extra=context)
            raise ServiceUnavailableException(detail=f"Catalog store unavailable for {operation}")

        elif isinstance(error, IntegrityError):
            error_msg = str(error.orig) if hasattr(error, 'orig') else str(error)
            self.logger.error(f"Database integrity error during {operation}: {error_msg}", extra=context)

            if "unique constraint" in error_msg.lower() or "duplicate key" in error_msg.lower():
                raise ConflictException(detail=f"Resource already exists for {operation}")
            else:
                raise ServiceError(f"Data integrity error during {operation}", error, context)

        elif isinstance(error, (DatabaseError, SQLAlchemyError)):
            self.logger.error(f"Database error during {operation}: {str(error)}", extra=context)
            raise ServiceError(f"Database operation failed for {operation}", error, context)

        else:
            # Not a database error, re-raise as is
            raise error

    def handle_general_error(self, error: Exception, operation: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Handle general errors with proper logging"""
        context = context or {}

        if isinstance(error, HTTPException):
            # Already a proper HTTP exception, just log and re-raise
            self.logger.info(f"Known error during {operation}: {error.detail}", extra=context)
            raise error

        elif isinstance(error, (OSError, ConnectionError)):
            # Driver-level connection failures surface before SQLAlchemy wraps them
            self.logger.error(f"Catalog store unreachable during {operation}: {str(error)}", extra=context)
            raise ServiceUnavailableException(detail=f"Catalog store unavailable for {operation}")

        elif isinstance(error, ServiceError):
            self.logger.error(f"Service error during {operation}: {error.message}", extra=context)
            raise error

        else:
            # Unknown error, log with full context
            self.logger.error(f"Unexpected error during {operation}: {str(error)}",
                            extra=context, exc_info=True)
            raise ServiceError(f"Unexpected error during {operation}", error, context)

    def log_success(self, operation: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log successful operations"""
        context = context or {}
        self.logger.debug(f"Successfully completed {operation}", extra=context)


def handle_service_errors(operation: str):
    """Decorator for handling service method errors"""
    def decorator(func):
        def _get_error_handler(instance) -> ErrorHandler:
            error_handler = getattr(instance, '_error_handler', None)
            if not error_handler:
                error_handler = ErrorHandler(instance.__class__.__name__)
            return error_handler

        def _handle(error_handler: ErrorHandler, error: Exception, args, kwargs):
            context = {
                "method": func.__name__,
                "function_args": str(args)[:100],
                "function_kwargs": str(kwargs)[:100]
            }

            # Let HTTPException (business logic exceptions) pass through
            if isinstance(error, HTTPException):
                raise error
            elif isinstance(error, SQLAlchemyError):
                error_handler.handle_database_error(error, operation, context)
            else:
                error_handler.handle_general_error(error, operation, context)

        @wraps(func)
        async def async_wrapper(self, *args, **kwargs):
            error_handler = _get_error_handler(self)
            try:
                result = await func(self, *args, **kwargs)
                error_handler.log_success(operation, {"function_args": str(args)[:100], "function_kwargs": str(kwargs)[:100]})
                return result
            except Exception as e:
                _handle(error_handler, e, args, kwargs)

        return async_wrapper

    return decorator
