import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="CamelModel")


class CamelModel(BaseModel):
    """Base model for camelCase wire payloads.

    Attributes are snake_case in Python and camelCase on the wire. Either
    spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @classmethod
    def from_lenient(cls: type[T], raw: dict[str, Any]) -> T:
        """Validate *raw* field by field, dropping values that do not validate.

        A field that is null or has the wrong type is treated as absent
        instead of failing the whole payload. Types are checked strictly:
        ``true`` is not an opacity and ``"yes"`` is not a flag.

        Args:
            raw: Mapping as decoded from JSON

        Returns:
            Model instance holding only the fields that validated
        """
        clean: dict[str, Any] = {}
        for name, field in cls.model_fields.items():
            alias = field.alias or name
            key = alias if alias in raw else name
            if key not in raw:
                continue
            value = raw[key]
            if value is None:
                logger.debug("Dropping null field %s", alias)
                continue
            try:
                clean[name] = TypeAdapter(field.annotation).validate_python(value, strict=True)
            except ValidationError as exc:
                logger.debug("Dropping invalid field %s=%r: %s", alias, value, exc)
        return cls.model_validate(clean)
