# storefront/core/records.py
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError
from sqlmodel import SQLModel

from storefront.core.errors import MalformedRecord

T = TypeVar("T", bound=SQLModel)


def decode_record(schema: type[T], row: Mapping[str, Any]) -> T:
    """
    Cast a loosely-typed row from the store into a strict read schema.

    Rows from PostgREST and from denormalized views come back as plain
    dicts; this is the only place they are trusted to have a shape.

    Raises:
        MalformedRecord(502): naming the entity and the failing fields.
    """
    try:
        return schema.model_validate(dict(row))
    except PydanticValidationError as exc:
        fields = sorted(
            {".".join(str(p) for p in err["loc"]) for err in exc.errors()}
        )
        raise MalformedRecord(
            f"Malformed {schema.__name__} record",
            entity=schema.__name__,
            fields=fields,
        ) from exc


def decode_records(schema: type[T], rows: Iterable[Mapping[str, Any]]) -> list[T]:
    return [decode_record(schema, row) for row in rows]
