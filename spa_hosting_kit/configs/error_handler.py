"""
Centralized error handling for the SPA Hosting Kit.

This module defines the error taxonomy raised while loading a hosting
configuration, plus the validation helpers used by the JSON resource config
layer (policy files, Lambda folder configs). Every error is surfaced to the
caller verbatim; nothing here retries or recovers.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Union
from functools import wraps


class HostingConfigError(Exception):
    """Base class for every hosting configuration error."""


class NotFoundError(HostingConfigError, FileNotFoundError):
    """The configuration document does not exist."""


class ParseError(HostingConfigError, ValueError):
    """The configuration document is not well-formed YAML, or has the wrong shape."""


class EmptyDocumentError(HostingConfigError, ValueError):
    """The configuration document exists but holds nothing."""


class ValidationFailure(HostingConfigError, ValueError):
    """
    One or more validation rules failed.

    Attributes:
        errors: Every error message, in rule order
    """

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        lines = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(f"Configuration validation failed:\n{lines}")


class ErrorHandler:
    """
    Validation helpers for the JSON resource configs.

    Each helper raises on the first problem it finds.
    """

    @staticmethod
    def validate_path_exists(
            path: Union[str, Path],
            path_type: str = "Path"
        ) -> None:
        """
        Validate that a path exists and is a directory.

        Args:
            path: Path to validate
            path_type: Type description for error messages

        Raises:
            FileNotFoundError: If path does not exist or is not a directory
        """
        if not Path(path).is_dir():
            raise FileNotFoundError(f"{path_type} not found: {path}")

    @staticmethod
    def validate_file_exists(
            file_path: Union[str, Path],
            file_type: str = "File"
        ) -> None:
        """
        Validate that a file exists.

        Args:
            file_path: File path to validate
            file_type: Type description for error messages

        Raises:
            NotFoundError: If file does not exist
        """
        if not Path(file_path).is_file():
            raise NotFoundError(f"{file_type} not found: {file_path}")

    @staticmethod
    def validate_required_fields(
            data: Dict[str, Any],
            required_fields: List[str],
            context: str = "Configuration"
        ) -> None:
        """
        Validate that all required fields are present in a dictionary.

        Args:
            data: Dictionary to validate
            required_fields: List of field names that must be present
            context: Context description for error messages

        Raises:
            ValueError: If any required fields are missing
        """
        missing_fields = [field for field in required_fields if field not in data]
        if missing_fields:
            raise ValueError(f"{context} missing required fields: {', '.join(missing_fields)}")

    @staticmethod
    def validate_enum_value(
            value: Any,
            valid_values: List[Any],
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is one of the allowed enum values.

        Raises:
            ValueError: If value is not in the allowed list
        """
        if value not in valid_values:
            raise ValueError(f"{context} field '{field_name}' must be one of: {', '.join(map(str, valid_values))}")

    @staticmethod
    def validate_type(
            value: Any,
            expected_type: Union[type, tuple],
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is of the expected type.

        Raises:
            TypeError: If value is not of the expected type
        """
        if not isinstance(value, expected_type):
            names = (
                " or ".join(t.__name__ for t in expected_type)
                if isinstance(expected_type, tuple)
                else expected_type.__name__
            )
            raise TypeError(f"{context} field '{field_name}' must be of type {names}, got {type(value).__name__}")

    @staticmethod
    def validate_string_not_empty(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a non-empty string.

        Raises:
            ValueError: If value is not a non-empty string
        """
        if not isinstance(value, str) or value.strip() == "":
            raise ValueError(f"{context} field '{field_name}' must be a non-empty string")

    @staticmethod
    def validate_list_not_empty(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a non-empty list.

        Raises:
            ValueError: If value is not a non-empty list
        """
        if not isinstance(value, list) or len(value) == 0:
            raise ValueError(f"{context} field '{field_name}' must be a non-empty list")

    @staticmethod
    def validate_mapping(
            value: Any,
            field_name: str,
            source: Union[str, Path]
        ) -> None:
        """
        Validate that a section of the hosting document is a mapping.

        Args:
            value: Parsed section value (None is allowed: the section is absent)
            field_name: Document path of the section
            source: Document the section came from

        Raises:
            ParseError: If the section is present but not a mapping
        """
        if value is not None and not isinstance(value, Mapping):
            raise ParseError(
                f"Malformed configuration in {source}: '{field_name}' must be a mapping, "
                f"got {type(value).__name__}"
            )

    @staticmethod
    def validate_scalar(
            value: Any,
            field_name: str,
            source: Union[str, Path]
        ) -> None:
        """
        Validate that a text field of the hosting document holds a single value.

        YAML reads unquoted values such as `2024` or `1.0` as numbers; those are
        accepted and converted to text by the caller.

        Raises:
            ParseError: If the field holds a mapping or a list
        """
        if isinstance(value, (Mapping, list, tuple, set)):
            raise ParseError(
                f"Malformed configuration in {source}: '{field_name}' must be a single value, "
                f"got {type(value).__name__}"
            )


class ValidationDecorators:
    """
    Decorators for common validation patterns.
    """

    @staticmethod
    def validate_required_config_fields(
            required_fields: List[str],
            config_param: str = "conf",
            context: str = "Configuration"
        ):
        """
        Decorator to validate that a configuration dictionary has all required fields.

        Args:
            required_fields: List of required field names
            config_param: Name of the config parameter to validate
            context: Context description for error messages

        Returns:
            Decorator function
        """
        def decorator(func: Callable) -> Callable:
            @wraps(func)
            def wrapper(*args, **kwargs):
                if config_param in kwargs:
                    config_value = kwargs[config_param]
                else:
                    # (scope, logical_name, conf)
                    if len(args) > 2:
                        config_value = args[2]
                    else:
                        raise ValueError(f"Config parameter '{config_param}' not found in function arguments")

                ErrorHandler.validate_required_fields(config_value, required_fields, context)
                return func(*args, **kwargs)
            return wrapper
        return decorator
