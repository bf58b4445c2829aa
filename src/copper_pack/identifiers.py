"""Parse user-supplied record identifiers (bare IDs or Copper web URLs)."""

from typing import Optional

from pydantic import BaseModel

from copper_pack.constants import (
    COPPER_ID_REGEX,
    COPPER_RECORD_URL_REGEX,
    RecordType,
    record_type_from_web_token,
)
from copper_pack.errors import InvalidIdentifierError, TypeMismatchError
from copper_pack.text import add_indefinite_article


class RecordIdentifier(BaseModel):
    """Record ID plus its type, when the input revealed it (URLs do, bare IDs don't)."""

    id: str
    type: Optional[RecordType] = None


def resolve_identifier(value: str) -> RecordIdentifier:
    """
    Extract the record ID (and type, for URLs) from a Copper ID or record URL.
    Accepts e.g. "123456" or "https://app.copper.com/companies/999/app#/deal/123456".
    """
    value = (value or "").strip()
    if COPPER_ID_REGEX.match(value):
        return RecordIdentifier(id=value)

    match = COPPER_RECORD_URL_REGEX.search(value)
    if match:
        web_token, record_id = match.group(1), match.group(2)
        return RecordIdentifier(id=record_id, type=record_type_from_web_token(web_token))

    raise InvalidIdentifierError(value)


def check_record_type(actual: Optional[RecordType | str], expected: RecordType | str) -> None:
    """Raise TypeMismatchError when a known type differs from the expected one."""
    if actual is None:
        return
    actual_value = RecordType(actual).value
    expected_value = RecordType(expected).value
    if actual_value != expected_value:
        raise TypeMismatchError(
            f"Expected {add_indefinite_article(expected_value)}, "
            f"but got {add_indefinite_article(actual_value)}",
            expected=expected_value,
            actual=actual_value,
        )


def resolve_expected(value: str, expected: RecordType | str) -> str:
    """Resolve an identifier and check it against the expected type; returns the ID."""
    identifier = resolve_identifier(value)
    check_record_type(identifier.type, expected)
    return identifier.id
