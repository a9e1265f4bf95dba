"""
recordflow Core: Constants and Type Definitions

This module provides project-wide constants, error codes, type aliases and
the MISSING sentinel used for absent record fields.
"""
from enum import Enum, IntEnum
from typing import Any, Dict, List, Mapping, Sequence, TypeAlias

# Version information
RECORDFLOW_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for recordflow operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad argument, invalid configuration
    NOT_FOUND = 2  # File or resource doesn't exist
    INTERNAL_ERROR = 6  # Bug in recordflow or in a registered rule


class RecordflowError(Exception):
    """Base exception for recordflow errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize RecordflowError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class _Missing:
    """Marker for a field that is absent from a record."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()


class BuiltinRule(Enum):
    """Names of the rules every default registry carries."""

    INCLUDE = "include"  # Keep records matching every clause
    EXCLUDE = "exclude"  # Drop records matching any clause
    SORT_BY = "sort_by"  # Stable multi-key sort


class ConfigKey:
    """Dotted configuration keys."""

    LOG_LEVEL = "recordflow.logging.level"
    LOG_FILE = "recordflow.logging.file"
    HALT_ON_ERROR = "recordflow.pipeline.halt_on_error"


class RequestKey:
    """Keys of the process() request and response documents."""

    DATA = "data"
    CONDITION = "condition"
    RESULT = "result"


# Type aliases for clarity
Record: TypeAlias = Mapping[str, Any]
Collection: TypeAlias = Sequence[Record]
Response: TypeAlias = Dict[str, List[Record]]
