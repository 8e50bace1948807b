"""
Error handling and reporting for pseudocoder.

The translation engine reports three distinguishable failures: malformed
input, an exhausted output buffer, and a mnemonic with no translation. Each
has its own exception class so callers can pick the right recovery (fix the
arguments, grow the buffer, or fall back to plain disassembly text).
"""

import sys
import traceback
import logging
from enum import Enum
from typing import Optional, Dict, Any
from dataclasses import dataclass


class ErrorSeverity(Enum):
    """Error severity levels."""
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class ErrorCategory(Enum):
    """Categories of errors that can occur."""
    INPUT_ERROR = "Input Error"
    CAPACITY_ERROR = "Capacity Error"
    TRANSLATION_ERROR = "Translation Error"
    DECODER_ERROR = "Decoder Error"
    CONFIGURATION_ERROR = "Configuration Error"
    INTERNAL_ERROR = "Internal Error"


@dataclass
class ErrorContext:
    """Context information for an error."""
    mnemonic: Optional[str] = None
    operand_index: Optional[int] = None
    address: Optional[int] = None
    additional_info: Optional[Dict[str, Any]] = None


class PseudocoderError(Exception):
    """Base exception class for pseudocoder errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.INTERNAL_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[ErrorContext] = None,
        suggestion: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.suggestion = suggestion
        self.original_exception = original_exception

    def __str__(self):
        """Format error message with all context."""
        lines = [f"{self.severity.value}: {self.category.value}: {self.message}"]

        if self.context.mnemonic:
            lines.append(f"  Mnemonic: {self.context.mnemonic}")
        if self.context.operand_index is not None:
            lines.append(f"  Operand: #{self.context.operand_index}")
        if self.context.address is not None:
            lines.append(f"  Address: {self.context.address:#x}")
        if self.context.additional_info:
            for key, value in self.context.additional_info.items():
                lines.append(f"  {key}: {value}")

        if self.suggestion:
            lines.append(f"  Suggestion: {self.suggestion}")

        if self.original_exception:
            lines.append(
                f"  Caused by: {type(self.original_exception).__name__}: {self.original_exception}"
            )

        return "\n".join(lines)


class InputValidationError(PseudocoderError):
    """Malformed arguments; always fixable by the caller."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.INPUT_ERROR,
            **kwargs
        )


class OperandError(InputValidationError):
    """An operand that cannot be rendered (pointer, unknown memory kind, missing)."""
    pass


class RegisterError(OperandError):
    """A register identifier outside the register-name table."""

    def __init__(self, register: int, **kwargs):
        self.register = register
        super().__init__(f"Register identifier {register} is out of range", **kwargs)


class CapacityExceededError(PseudocoderError):
    """An emission step did not fit into the remaining buffer capacity."""

    def __init__(self, requested: int, remaining: int, **kwargs):
        self.requested = requested
        self.remaining = remaining
        kwargs.setdefault("suggestion", "Retry with a larger output buffer.")
        super().__init__(
            f"Cannot append {requested} byte(s), only {remaining} remaining",
            category=ErrorCategory.CAPACITY_ERROR,
            **kwargs
        )


class NoTranslationError(PseudocoderError):
    """The mnemonic has no pseudo-code translation."""

    def __init__(self, mnemonic: str, **kwargs):
        self.mnemonic = mnemonic
        kwargs.setdefault("suggestion", "Fall back to the disassembly text.")
        super().__init__(
            f"No translation available for '{mnemonic}'",
            category=ErrorCategory.TRANSLATION_ERROR,
            severity=ErrorSeverity.WARNING,
            **kwargs
        )


class DecoderError(PseudocoderError):
    """Error raised by the capstone decoding bridge."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.DECODER_ERROR,
            **kwargs
        )


class ConfigurationError(PseudocoderError):
    """Error related to configuration."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION_ERROR,
            **kwargs
        )


class ErrorHandler:
    """Central error handler for the command-line front end."""

    def __init__(self, debug_mode: bool = False):
        self.debug_mode = debug_mode
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Set up logging configuration."""
        logger = logging.getLogger("pseudocoder")
        logger.setLevel(logging.DEBUG if self.debug_mode else logging.INFO)

        if not logger.handlers:
            console_handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        for handler in logger.handlers:
            handler.setLevel(logging.DEBUG if self.debug_mode else logging.INFO)

        return logger

    def handle_error(
        self,
        error: Exception,
        context: Optional[ErrorContext] = None,
        reraise: bool = False
    ):
        """
        Handle an error with appropriate logging and reporting.

        Args:
            error: The exception to handle
            context: Additional context information
            reraise: Whether to re-raise the exception after handling
        """
        if isinstance(error, PseudocoderError):
            self._log_error(error)
        else:
            self._log_error(PseudocoderError(
                message=str(error),
                context=context,
                original_exception=error
            ))

        if self.debug_mode:
            traceback.print_exception(type(error), error, error.__traceback__)

        if reraise:
            raise error

    def _log_error(self, error: PseudocoderError):
        """Log an error with the level matching its severity."""
        error_message = str(error)

        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(error_message)
        elif error.severity == ErrorSeverity.ERROR:
            self.logger.error(error_message)
        elif error.severity == ErrorSeverity.WARNING:
            self.logger.warning(error_message)
        else:
            self.logger.info(error_message)


# Global error handler instance
_error_handler: Optional[ErrorHandler] = None


def get_error_handler(debug_mode: bool = False) -> ErrorHandler:
    """Get or create the global error handler."""
    global _error_handler
    if _error_handler is None or _error_handler.debug_mode != debug_mode:
        _error_handler = ErrorHandler(debug_mode=debug_mode)
    return _error_handler


# Common error messages with suggestions
ERROR_MESSAGES = {
    "invalid_hex": {
        "message": "Input is not a valid hex byte string: {text!r}",
        "suggestion": "Pass instruction bytes as hex, e.g. '89d8' or '89 d8'."
    },
    "decode_failed": {
        "message": "Could not decode an instruction at address {address:#x}",
        "suggestion": "Check the --arch option and the instruction bytes."
    },
    "capacity_exhausted": {
        "message": "Translation at {address:#x} does not fit into {capacity} bytes",
        "suggestion": "Raise --capacity."
    },
    "invalid_capacity": {
        "message": "Buffer capacity must be between 1 and {maximum}, got {capacity}",
        "suggestion": "Pass a positive --capacity value."
    },
}


def create_error(
    error_key: str,
    category: ErrorCategory = ErrorCategory.INTERNAL_ERROR,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    context: Optional[ErrorContext] = None,
    **format_args
) -> PseudocoderError:
    """
    Create an error from a predefined error message.

    Args:
        error_key: Key in ERROR_MESSAGES dictionary
        category: Error category
        severity: Error severity level
        context: Error context
        **format_args: Arguments to format the error message

    Returns:
        Configured PseudocoderError instance
    """
    if error_key not in ERROR_MESSAGES:
        return PseudocoderError(
            message=f"Unknown error: {error_key}",
            severity=severity,
            context=context
        )

    error_info = ERROR_MESSAGES[error_key]
    message = error_info["message"].format(**format_args)
    suggestion = error_info.get("suggestion")

    return PseudocoderError(
        message=message,
        category=category,
        severity=severity,
        context=context,
        suggestion=suggestion
    )
