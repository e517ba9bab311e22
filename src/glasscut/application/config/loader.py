"""Configuration and inventory file loading with error handling.

Both optimizer configuration files and inventory snapshot files are JSON
documents validated with Pydantic. File system errors, JSON syntax errors
and schema violations are all reported as ``ConfigError`` with a
category and, for validation failures, one detail entry per problem.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from glasscut.application.config.inventory_schema import InventoryFile
from glasscut.application.config.schema import OptimizerConfiguration

_Model = TypeVar("_Model", bound=BaseModel)


class ConfigError(Exception):
    """Exception raised for configuration and inventory file errors.

    Attributes:
        message: The primary error message.
        error_type: Category of error (file_not_found, json_parse,
            validation, ...).
        path: Path to the file, if the data came from a file.
        details: Additional error details (line/column for JSON,
            validation errors, etc.).
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a Pydantic location tuple as a JSON path string.

    Examples:
        >>> _format_json_path(("waste", "min_waste_mm"))
        'waste.min_waste_mm'
        >>> _format_json_path(("cut_requests", 0, "width_mm"))
        'cut_requests[0].width_mm'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "path": _format_json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
        )
    return details


def _format_validation_error_message(details: list[dict[str, Any]]) -> str:
    lines = ["Validation failed:"]
    for detail in details:
        path = detail["path"] or "(root)"
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {path}: {detail['message']} (got: {value!r})")
        else:
            lines.append(f"  - {path}: {detail['message']}")
    return "\n".join(lines)


def _read_json(path: Path, kind: str) -> Any:
    if not path.exists():
        raise ConfigError(
            message=f"{kind} file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigError(
            message=f"Permission denied reading {kind.lower()} file: {path}",
            error_type="permission_denied",
            path=path,
        ) from e
    except OSError as e:
        raise ConfigError(
            message=f"Error reading {kind.lower()} file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=(
                f"Invalid JSON in {kind.lower()} file: {path} "
                f"(line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e


def _validate(model: type[_Model], data: Any, path: Path | None = None) -> _Model:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        details = _extract_validation_errors(e)
        raise ConfigError(
            message=_format_validation_error_message(details),
            error_type="validation",
            path=path,
            details=details,
        ) from e


def load_config(path: Path) -> OptimizerConfiguration:
    """Load and validate an optimizer configuration from a JSON file.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
            ``error_type`` is one of ``file_not_found``, ``json_parse``,
            ``validation`` (or a read error category).

    Example:
        >>> try:
        ...     config = load_config(Path("optimizer.json"))
        ... except ConfigError as e:
        ...     print(f"Error: {e}")
    """
    return _validate(OptimizerConfiguration, _read_json(path, "Config"), path)


def load_config_from_dict(data: dict[str, Any]) -> OptimizerConfiguration:
    """Load and validate an optimizer configuration from a dictionary.

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(OptimizerConfiguration, data)


def load_inventory(path: Path) -> InventoryFile:
    """Load and validate an inventory snapshot from a JSON file.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    return _validate(InventoryFile, _read_json(path, "Inventory"), path)


def load_inventory_from_dict(data: dict[str, Any]) -> InventoryFile:
    """Load and validate an inventory snapshot from a dictionary.

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(InventoryFile, data)
