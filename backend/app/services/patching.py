"""
Typed partial updates.

A stored row is read into a frozen record of its updatable columns, the
caller's patch (only the fields it actually sent) is applied to produce a new
record, and the new record is validated before it is written back. Every
updatable column is rewritten from the record.
"""

from typing import TypeVar

import pydantic
from pydantic import BaseModel

from app.core.errors import ValidationError

R = TypeVar("R", bound=BaseModel)


def apply_patch(record_cls: type[R], current: object, patch: BaseModel) -> R:
    record = record_cls.model_validate(current)
    changes = patch.model_dump(exclude_unset=True)
    try:
        return record_cls.model_validate({**record.model_dump(), **changes})
    except pydantic.ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise ValidationError(
            message="Os dados enviados para atualização são inválidos.",
            action=f"Verifique os campos: {fields}.",
            cause=e,
        )


def write_record(instance: object, record: BaseModel) -> None:
    for field, value in record.model_dump().items():
        setattr(instance, field, value)


def changed(patch: BaseModel, field: str, current_value) -> bool:
    """
    True when the patch carries a non-null `field` different from the stored one.

    An explicit null is left for `apply_patch` to reject against the record.
    """
    if field not in patch.model_fields_set:
        return False
    value = getattr(patch, field)
    return value is not None and value != current_value
