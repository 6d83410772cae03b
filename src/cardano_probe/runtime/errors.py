"""
Cardano Probe Error Model

Every stage of the probe fails the whole run. This module defines the error
types each stage raises so the entry point can report them uniformly.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes grouped by the stage that raises them."""

    UNKNOWN = 1

    # Configuration (100-199)
    INVALID_CONFIGURATION = 100

    # Keys (200-299)
    INVALID_MNEMONIC = 200

    # Node session (300-399)
    NODE_NOT_READY = 300
    SESSION_FAILED = 301
    SESSION_CLOSED = 302

    # Queries (400-499)
    QUERY_FAILED = 400
    MALFORMED_RESPONSE = 401

    # Selection (500-599)
    NO_USABLE_OUTPUT = 500

    # Assembly (600-699)
    ASSEMBLY_FAILED = 600
    INSUFFICIENT_FUNDS = 601
    OUTPUT_TOO_SMALL = 602
    TRANSACTION_TOO_LARGE = 603

    # Signing (700-799)
    SIGNING_FAILED = 700

    # Submission (800-899)
    SUBMISSION_REJECTED = 800


class ProbeError(Exception):
    """
    Base class for all probe errors.

    Carries a human readable message plus structured diagnostic detail.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        """
        Initialize a probe error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ConfigurationError(ProbeError):
    """Environment configuration is missing or malformed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.INVALID_CONFIGURATION, details, cause)


class EntropyError(ProbeError):
    """Mnemonic could not be decoded into entropy."""

    def __init__(self, message: str = "Invalid mnemonic",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.INVALID_MNEMONIC, details, cause)


class NodeNotReadyError(ProbeError):
    """Node is reachable but does not know a chain tip yet."""

    def __init__(self, message: str = "Node is not ready",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.NODE_NOT_READY, details, cause)


class SessionError(ProbeError):
    """Transport level failure of the node session."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.SESSION_FAILED,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class SessionClosedError(SessionError):
    """The node closed the session."""

    def __init__(self, message: str = "Session closed",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.SESSION_CLOSED, details, cause)


class QueryError(ProbeError):
    """Ledger state query failed or returned something unusable."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.QUERY_FAILED,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class SelectionError(ProbeError):
    """UTxO selection errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.NO_USABLE_OUTPUT,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class NoUsableOutputError(SelectionError):
    """No unspent output satisfies the funding predicate."""

    def __init__(self, message: str = "Address should have at least 1 utxo with ada!",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.NO_USABLE_OUTPUT, details, cause)


class AssemblyError(ProbeError):
    """Transaction body could not be built."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ASSEMBLY_FAILED,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class InsufficientFundsError(AssemblyError):
    """Inputs do not cover outputs plus fee."""

    def __init__(self, message: str = "Insufficient funds",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.INSUFFICIENT_FUNDS, details, cause)


class OutputTooSmallError(AssemblyError):
    """An explicit output is below the minimum UTxO value."""

    def __init__(self, message: str = "Output below minimum UTxO value",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.OUTPUT_TOO_SMALL, details, cause)


class TransactionTooLargeError(AssemblyError):
    """Transaction or output value exceeds a protocol size ceiling."""

    def __init__(self, message: str = "Transaction too large",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.TRANSACTION_TOO_LARGE, details, cause)


class SigningError(ProbeError):
    """Witness could not be produced."""

    def __init__(self, message: str = "Signing failed",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.SIGNING_FAILED, details, cause)


class SubmissionError(ProbeError):
    """The node rejected the transaction."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.SUBMISSION_REJECTED, details, cause)


SUBMISSION_METHODS = frozenset({"submitTransaction", "evaluateTransaction"})


def error_from_response(response: Dict[str, Any], method: str) -> Optional[ProbeError]:
    """
    Create an appropriate error from a JSON-RPC response.

    Args:
        response: Decoded JSON-RPC response
        method: Method the response answers

    Returns:
        Appropriate error instance or None if no error
    """
    if "error" not in response:
        return None

    error_data = response["error"]
    if isinstance(error_data, dict):
        message = str(error_data.get("message", "Unknown error"))
        details = {"method": method, "code": error_data.get("code")}
        if "data" in error_data:
            details["data"] = error_data["data"]
    else:
        message = str(error_data)
        details = {"method": method}

    if method in SUBMISSION_METHODS:
        return SubmissionError(message, details)
    return QueryError(message, details=details)


__all__ = [
    "ErrorCode",
    "ProbeError",
    "ConfigurationError",
    "EntropyError",
    "NodeNotReadyError",
    "SessionError",
    "SessionClosedError",
    "QueryError",
    "SelectionError",
    "NoUsableOutputError",
    "AssemblyError",
    "InsufficientFundsError",
    "OutputTooSmallError",
    "TransactionTooLargeError",
    "SigningError",
    "SubmissionError",
    "error_from_response",
]
