"""AccessRequest model and request file loading."""

from __future__ import annotations

import logging
import os
from types import MappingProxyType
from typing import Any, Mapping, Union

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from sshgrant.errors import ConfigNotFoundError, RequestFileError, ValidationError

__all__ = [
    "AccessRequest",
    "EMPTY_SUBJECTS_MESSAGE",
    "check_subjects",
    "load_requests",
]

EMPTY_SUBJECTS_MESSAGE = "both users and groups empty"

_logger = logging.getLogger("sshgrant.request")


class AccessRequest(BaseModel):
    """Allow users and groups to reach sshd from a list of hosts.

    ``users`` and ``groups`` behave as sets with a stable first-seen order.
    A bare string is accepted wherever a list is expected. ``sshd_overrides``
    is stored read-only, with list values as tuples.

    Construction raises :class:`sshgrant.errors.ValidationError`, never the
    pydantic error type.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    name: str = Field(default="sshd", min_length=1)
    hostlist: tuple[str, ...] = Field(min_length=1)
    users: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()
    sshd_overrides: Mapping[str, Union[str, tuple[str, ...]]] = Field(
        default_factory=dict,
        validate_default=True,
        validation_alias=AliasChoices("sshd_overrides", "sshdOverrides", "sshd_options"),
    )

    @field_validator("hostlist", "users", "groups", mode="before")
    @classmethod
    def coerce_list(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("sshd_overrides", mode="before")
    @classmethod
    def coerce_scalars(cls, value: Any) -> Any:
        # YAML reads bare yes/no as booleans; sshd wants the words back.
        if not isinstance(value, dict):
            return value
        return {key: _directive_value(item) for key, item in value.items()}

    @field_validator("hostlist")
    @classmethod
    def check_hosts(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(entry == "" for entry in value):
            raise ValueError("hostlist entries must be non-empty strings")
        return value

    @field_validator("sshd_overrides")
    @classmethod
    def freeze_overrides(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_validator("users", "groups")
    @classmethod
    def dedupe(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @model_validator(mode="after")
    def require_subjects(self) -> AccessRequest:
        if not self.users and not self.groups:
            raise ValueError(EMPTY_SUBJECTS_MESSAGE)
        return self

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            raise _validation_error(e) from e

    @classmethod
    def build(cls, **fields: Any) -> AccessRequest:
        """Validate fields into a request.

        Raises:
            ValidationError: If any field is invalid, or if both users and
                groups are empty.
        """
        return cls(**fields)

    @classmethod
    def model_validate(cls, obj: Any, *args: Any, **kwargs: Any) -> AccessRequest:
        try:
            return super().model_validate(obj, *args, **kwargs)
        except PydanticValidationError as e:
            raise _validation_error(e) from e


def _directive_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_directive_value(item) for item in value]
    return value


def _validation_error(error: PydanticValidationError) -> ValidationError:
    errors = error.errors(include_url=False)
    return ValidationError(message=_first_message(errors), errors=errors, cause=error)


def _first_message(errors: list[Any]) -> str:
    first = errors[0]
    ctx_error = first.get("ctx", {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    loc = ".".join(str(part) for part in first["loc"])
    return f"{loc}: {first['msg']}" if loc else first["msg"]


def check_subjects(request: AccessRequest) -> None:
    """Raise ValidationError if the request allows neither users nor groups."""
    if not request.users and not request.groups:
        raise ValidationError(message=EMPTY_SUBJECTS_MESSAGE)


def load_requests(yaml_path: str) -> dict[str, AccessRequest]:
    """Load named access requests from a YAML file.

    The file holds a ``requests`` key that is either a mapping of request
    name to fields, or a list of field mappings each carrying ``name``.

    Args:
        yaml_path: Path to the YAML request file.

    Returns:
        Requests keyed by name, in file order.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        RequestFileError: If the YAML is invalid or has structural errors.
        ValidationError: If a request fails validation.
    """
    if not os.path.isfile(yaml_path):
        raise ConfigNotFoundError(config_path=yaml_path)

    with open(yaml_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RequestFileError(file_path=yaml_path, reason=f"invalid YAML: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise RequestFileError(
            file_path=yaml_path,
            reason=f"must be a mapping, got {type(data).__name__}",
        )
    if "requests" not in data:
        raise RequestFileError(file_path=yaml_path, reason="missing required 'requests' key")

    raw_requests = data["requests"]
    if isinstance(raw_requests, dict):
        entries = []
        for name, fields in raw_requests.items():
            if not isinstance(fields, dict):
                raise RequestFileError(
                    file_path=yaml_path,
                    reason=f"request '{name}' must be a mapping, got {type(fields).__name__}",
                )
            entries.append({**fields, "name": str(name)})
    elif isinstance(raw_requests, list):
        entries = []
        for i, fields in enumerate(raw_requests):
            if not isinstance(fields, dict):
                raise RequestFileError(
                    file_path=yaml_path,
                    reason=f"request {i} must be a mapping, got {type(fields).__name__}",
                )
            if "name" not in fields:
                raise RequestFileError(file_path=yaml_path, reason=f"request {i} missing required key 'name'")
            entries.append(fields)
    else:
        raise RequestFileError(
            file_path=yaml_path,
            reason=f"'requests' must be a mapping or list, got {type(raw_requests).__name__}",
        )

    requests: dict[str, AccessRequest] = {}
    for fields in entries:
        name = str(fields["name"])
        if name in requests:
            raise RequestFileError(file_path=yaml_path, reason=f"duplicate request name '{name}'")
        try:
            requests[name] = AccessRequest.build(**fields)
        except ValidationError as e:
            e.details["request"] = name
            raise

    _logger.debug("Loaded %d access requests from %s", len(requests), yaml_path)
    return requests
