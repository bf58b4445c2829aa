"""Copper API constants and the record-type descriptor table.

Copper names the same record type differently depending on context: a
customer is a "person" in the UI and API payloads, "people" in API paths,
and the legacy "contact" in web URLs.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

BASE_URL = "https://api.copper.com/developer_api/v1/"
WEB_HOST = "app.copper.com"

# Max accepted by the API is 200, but large pages can time out an invocation
PAGE_SIZE = 50
USERS_PAGE_SIZE = 200

STATUS_OPTIONS = ("Open", "Won", "Lost", "Abandoned")

# Cache windows (seconds)
REFERENCE_TTL = 60 * 60
USERS_TTL = 60 * 5

DEFAULT_SORT_BY = "date_created"
DEFAULT_SORT_DIRECTION = "asc"


class RecordType(str, Enum):
    """Record types exposed by the adapter."""

    PERSON = "person"
    COMPANY = "company"
    OPPORTUNITY = "opportunity"


@dataclass(frozen=True)
class RecordTypeInfo:
    """Vocabulary for one record type across API paths and web URLs."""

    record_type: RecordType
    plural: str  # API path segment
    web_token: str  # segment used in app.copper.com URLs


# fmt: off
RECORD_TYPES: dict[RecordType, RecordTypeInfo] = {
    RecordType.PERSON: RecordTypeInfo(RecordType.PERSON, "people", "contact"),
    RecordType.COMPANY: RecordTypeInfo(RecordType.COMPANY, "companies", "organization"),
    RecordType.OPPORTUNITY: RecordTypeInfo(RecordType.OPPORTUNITY, "opportunities", "deal"),
}
# fmt: on

_BY_WEB_TOKEN: dict[str, RecordTypeInfo] = {info.web_token: info for info in RECORD_TYPES.values()}

COPPER_ID_REGEX = re.compile(r"^[0-9]{5,}$")
COPPER_RECORD_URL_REGEX = re.compile(
    r"app\.copper\.com/companies/[0-9]+/app#/.*(contact|deal|organization)/([0-9]{5,})"
)


def record_type_info(record_type: RecordType | str) -> RecordTypeInfo:
    """Descriptor for a record type; accepts the enum or its string value."""
    try:
        return RECORD_TYPES[RecordType(record_type)]
    except ValueError:
        raise ValueError(
            f"Unknown record type: {record_type}. Available: {[t.value for t in RecordType]}"
        ) from None


def record_type_from_web_token(token: str) -> Optional[RecordType]:
    """Map a web-URL token (contact, deal, organization) to its record type."""
    info = _BY_WEB_TOKEN.get(token)
    return info.record_type if info else None


def record_endpoint(record_type: RecordType | str, record_id: str) -> str:
    """API endpoint for a single record, e.g. opportunities/12345."""
    return f"{record_type_info(record_type).plural}/{record_id}"
