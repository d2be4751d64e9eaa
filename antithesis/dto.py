"""Schema-driven DTOs.

Pydantic models are the single source for runtime validation, the JSON
projection sent to clients and the OpenAPI component schemas. Field names are
snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

import uuid
from typing import Annotated, Any, TypeVar

from flask import current_app, has_app_context
from pydantic import AnyUrl, BaseModel, BeforeValidator, ConfigDict, TypeAdapter, WithJsonSchema
from pydantic import AfterValidator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from .errors import ValidationError

M = TypeVar("M", bound="DTO")

_URL = TypeAdapter(AnyUrl)
_UUID = TypeAdapter(uuid.UUID)


def empty_to_none(value: Any) -> Any:
    # Form posts send "" for untouched optional inputs
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _url_shaped(value: str) -> str:
    try:
        _URL.validate_python(value)
    except PydanticValidationError:
        raise PydanticCustomError("invalid_url", "Invalid url") from None
    return value


def _uuid_shaped(value: str) -> str:
    try:
        return str(_UUID.validate_python(value))
    except PydanticValidationError:
        raise PydanticCustomError("invalid_uuid", "Invalid uuid") from None


UrlStr = Annotated[str, AfterValidator(_url_shaped), WithJsonSchema({"type": "string", "format": "uri"})]
UuidStr = Annotated[str, AfterValidator(_uuid_shaped), WithJsonSchema({"type": "string", "format": "uuid"})]
OptionalText = Annotated[str | None, BeforeValidator(empty_to_none)]
OptionalUrl = Annotated[UrlStr | None, BeforeValidator(empty_to_none)]


class DTO(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        from_attributes=True,
    )

    def to_json(self, *, exclude_unset: bool = False) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)

    def to_fields(self, *, exclude_unset: bool = False) -> dict[str, Any]:
        """Python-side field mapping (snake_case keys), for repositories."""
        return self.model_dump(exclude_unset=exclude_unset)

    @classmethod
    def from_json(cls: type[M], data: Any, *, auto_validate: bool | None = None) -> M:
        return validate(cls, data, auto_validate=auto_validate)

    def ensure_valid(self) -> None:
        """Re-run validation over the current field values."""
        validate(type(self), self.to_json(exclude_unset=True), auto_validate=True)


def issues_from(exc: PydanticValidationError, prefix: tuple[str, ...] = ()) -> list[dict[str, Any]]:
    return [
        {"path": [*prefix, *err["loc"]], "code": err["type"], "message": err["msg"]}
        for err in exc.errors(include_url=False, include_context=False, include_input=False)
    ]


def _auto_validate_default() -> bool:
    if has_app_context():
        return bool(current_app.config.get("DTO_AUTO_VALIDATE", True))
    return True


def validate(schema: type[M], raw: Any, *, auto_validate: bool | None = None) -> M:
    """Parse ``raw`` into ``schema`` or raise a 422 ``ValidationError``.

    With auto validation switched off the raw mapping is assigned as-is.
    """
    if raw is None:
        raw = {}
    if auto_validate is None:
        auto_validate = _auto_validate_default()
    if not auto_validate:
        return schema.model_construct(**dict(raw))
    try:
        return schema.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValidationError("Validation failed", issues_from(exc)) from exc


__all__ = [
    "DTO",
    "OptionalText",
    "OptionalUrl",
    "UrlStr",
    "UuidStr",
    "empty_to_none",
    "issues_from",
    "validate",
]
