# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
RegKeeper Exception Hierarchy

Exception Hierarchy:
    RegKeeperError (base)
    ├── ConfigError
    │   ├── ConfigValidationError
    │   └── ConfigFileError
    ├── ValidationError
    │   ├── PathSyntaxError
    │   └── FlagFormatError
    ├── ManifestError
    ├── CatalogError
    │   ├── DuplicateResourceError
    │   └── UnknownResourceError
    ├── DAGError
    │   ├── DAGCycleError
    │   └── DAGValidationError
    └── ResourceError
        └── ProviderError
            └── ProviderNotFoundError
"""

import logging
from typing import Any, Dict, List, Optional

# ============================================================================
# Base Exceptions
# ============================================================================


class RegKeeperError(Exception):
    """Base exception for all RegKeeper errors"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        result = {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

        if self.cause:
            result["cause"] = {
                "type": self.cause.__class__.__name__,
                "message": str(self.cause),
            }

        return result

    def __str__(self):
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.cause:
            base += f" | Caused by: {self.cause}"
        return base


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigError(RegKeeperError):
    """Configuration-related errors"""


class ConfigValidationError(ConfigError):
    """Configuration validation failed"""


class ConfigFileError(ConfigError):
    """Configuration file error"""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["path"] = self.path
        return result


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(RegKeeperError):
    """Input validation errors"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(
            {
                "field": self.field,
                "value": self.value,
                "errors": self.errors,
            }
        )
        return result


class PathSyntaxError(ValidationError, ValueError):
    """Registry path does not match the key path grammar"""

    def __init__(self, reason: str, fragment: Any = None, path: Any = None, **kwargs):
        message = f"Invalid registry path '{path}': {reason}"
        if fragment is not None and fragment != path:
            message += f" (at '{fragment}')"
        super().__init__(message, field="path", value=path, **kwargs)
        self.reason = reason
        self.fragment = fragment
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(
            {
                "reason": self.reason,
                "fragment": self.fragment,
                "path": self.path,
            }
        )
        return result


class FlagFormatError(ValidationError, ValueError):
    """Boolean parameter given a literal outside true/false"""

    def __init__(self, literal: Any, parameter: str = "purge_values", **kwargs):
        super().__init__(
            f"Validation Error: {parameter} must be true or false, not {literal}",
            field=parameter,
            value=literal,
            **kwargs,
        )
        self.literal = literal
        self.parameter = parameter


# ============================================================================
# Manifest Errors
# ============================================================================


class ManifestError(RegKeeperError):
    """Failed to load or interpret a declaration manifest"""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.file_path = file_path

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["file_path"] = self.file_path
        return result


# ============================================================================
# Catalog Errors
# ============================================================================


class CatalogError(RegKeeperError):
    """Catalog-related errors"""


class DuplicateResourceError(CatalogError):
    """Two declarations resolve to the same resource identity"""


class UnknownResourceError(CatalogError):
    """A relationship refers to a resource that is not in the catalog"""


# ============================================================================
# DAG Errors
# ============================================================================


class DAGError(RegKeeperError):
    """DAG-related errors"""


class DAGCycleError(DAGError):
    """Circular dependency detected in DAG"""

    def __init__(self, message: str, cycle: Optional[List[str]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.cycle = cycle or []

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["cycle"] = self.cycle
        return result


class DAGValidationError(DAGError):
    """DAG validation failed"""


# ============================================================================
# Resource Errors
# ============================================================================


class ResourceError(RegKeeperError):
    """Resource access errors"""


class ProviderError(ResourceError):
    """Live store read failed"""

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        key: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.provider_name = provider_name
        self.key = key

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(
            {
                "provider": self.provider_name,
                "key": self.key,
            }
        )
        return result


class ProviderNotFoundError(ProviderError):
    """Provider not found in registry"""


# ============================================================================
# Error Handler
# ============================================================================


class ErrorHandler:
    """Centralized error logging for command-line entry points"""

    @staticmethod
    def handle_exception(error: Exception) -> Dict[str, Any]:
        """
        Log an exception and return its dictionary form.

        Exceptions from outside the hierarchy are wrapped in RegKeeperError.
        """
        logger = logging.getLogger("regkeeper.error_handler")

        if not isinstance(error, RegKeeperError):
            error = RegKeeperError(message=str(error), cause=error)

        error_dict = error.to_dict()
        logger.error(f"{error_dict['type']}: {error_dict['message']}")
        logger.debug("Error details", exc_info=error)
        return error_dict
