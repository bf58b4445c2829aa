"""Output schemas for enriched records, and pruning records down to them.

Each property has an output name and, where it differs, the key it is read
from on the enriched record (`from_key`). Dotted keys such as
`address.street` read into nested objects.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from copper_pack.constants import RecordType

# Value types
STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"
ARRAY = "array"
OBJECT = "object"
# Copper ID, emitted as a string whatever type the API sent
ID = "id"

# Display hints
URL = "url"
DATE = "date"
CURRENCY = "currency"
PERSON = "person"
REFERENCE = "reference"

_MISSING = object()


@dataclass(frozen=True)
class SchemaProperty:
    name: str
    value_type: str = STRING
    from_key: Optional[str] = None
    hint: Optional[str] = None
    description: str = ""

    @property
    def source_key(self) -> str:
        return self.from_key or self.name


@dataclass(frozen=True)
class RecordSchema:
    """Declared shape of one record type's output."""

    record_type: RecordType
    id_property: str
    display_property: str
    properties: tuple[SchemaProperty, ...]
    featured: tuple[str, ...] = field(default_factory=tuple)

    def property_names(self) -> list[str]:
        return [p.name for p in self.properties]


def _address_properties() -> tuple[SchemaProperty, ...]:
    return (
        SchemaProperty("street", from_key="address.street", description="Address: street"),
        SchemaProperty("city", from_key="address.city", description="Address: city"),
        SchemaProperty("state", from_key="address.state", description="Address: state"),
        SchemaProperty("postalCode", from_key="address.postal_code", description="Address: postal code"),
        SchemaProperty("country", from_key="address.country", description="Address: country"),
    )


# fmt: off
_ASSIGNEE = SchemaProperty("assignee", OBJECT, hint=PERSON, description="Copper user the record is assigned to")
_TAGS = SchemaProperty("tags", ARRAY, description="Tags")
_DATE_CREATED = SchemaProperty("dateCreated", NUMBER, from_key="date_created", hint=DATE, description="Date created")
_DATE_MODIFIED = SchemaProperty("dateModified", NUMBER, from_key="date_modified", hint=DATE, description="Date modified")
_INTERACTIONS = SchemaProperty("interactionCount", NUMBER, from_key="interaction_count", description="Number of interactions")
_COMPANY_REF = SchemaProperty("company", OBJECT, hint=REFERENCE, description="Related company")

COMPANY_SCHEMA = RecordSchema(
    record_type=RecordType.COMPANY,
    id_property="companyId",
    display_property="companyName",
    featured=("fullAddress", "copperUrl", "websites"),
    properties=(
        SchemaProperty("companyName", from_key="name", description="Company name"),
        SchemaProperty("fullAddress", description="Company address"),
        _ASSIGNEE,
        _TAGS,
        SchemaProperty("copperUrl", from_key="url", hint=URL, description="View Company on Copper"),
        SchemaProperty("details", description="Company details"),
        SchemaProperty("phoneNumbers", ARRAY, from_key="phone_numbers", description="Phone numbers"),
        SchemaProperty("emailDomain", from_key="email_domain", description="Email domain"),
        _INTERACTIONS,
        SchemaProperty("socials", ARRAY, description="Social media links"),
        SchemaProperty("websites", ARRAY, description="Websites"),
        *_address_properties(),
        _DATE_CREATED,
        _DATE_MODIFIED,
        SchemaProperty("contactType", description="Type of contact"),
        SchemaProperty("contactTypeId", ID, from_key="contact_type_id", description="Contact type ID on Copper"),
        SchemaProperty("assigneeId", ID, from_key="assignee_id", description="Assignee ID on Copper"),
        SchemaProperty("companyId", ID, from_key="id", description="Company ID on Copper"),
    ),
)

PERSON_SCHEMA = RecordSchema(
    record_type=RecordType.PERSON,
    id_property="personId",
    display_property="fullName",
    featured=("title", "company", "primaryEmail", "assignee", "copperUrl"),
    properties=(
        SchemaProperty("fullName", from_key="name", description="Person name"),
        SchemaProperty("title", description="Title"),
        _COMPANY_REF,
        _ASSIGNEE,
        SchemaProperty("copperUrl", from_key="url", hint=URL, description="View Person on Copper"),
        _TAGS,
        SchemaProperty("contactType", description="Type of contact"),
        SchemaProperty("fullAddress", description="Full address"),
        SchemaProperty("details", description="Details"),
        SchemaProperty("primaryEmail", description="Primary email"),
        SchemaProperty("emails", ARRAY, description="Email addresses"),
        SchemaProperty("phoneNumbers", ARRAY, from_key="phone_numbers", description="Phone numbers"),
        SchemaProperty("socials", ARRAY, description="Social media links"),
        SchemaProperty("websites", ARRAY, description="Websites"),
        SchemaProperty("prefix", description="Prefix"),
        SchemaProperty("firstName", from_key="first_name", description="First name"),
        SchemaProperty("middleName", from_key="middle_name", description="Middle name"),
        SchemaProperty("lastName", from_key="last_name", description="Last name"),
        SchemaProperty("suffix", description="Name suffix"),
        *_address_properties(),
        _INTERACTIONS,
        _DATE_CREATED,
        _DATE_MODIFIED,
        SchemaProperty("companyId", ID, from_key="company_id", description="Company ID on Copper"),
        SchemaProperty("assigneeId", ID, from_key="assignee_id", description="Assignee ID on Copper"),
        SchemaProperty("personId", ID, from_key="id", description="Person ID on Copper"),
    ),
)

OPPORTUNITY_SCHEMA = RecordSchema(
    record_type=RecordType.OPPORTUNITY,
    id_property="opportunityId",
    display_property="opportunityName",
    featured=("company", "primaryContact", "status", "monetaryValue", "copperUrl"),
    properties=(
        SchemaProperty("opportunityName", from_key="name", description="Name of the opportunity"),
        SchemaProperty("primaryContact", OBJECT, hint=REFERENCE, description="Primary customer contact"),
        _COMPANY_REF,
        SchemaProperty("status", description="Status of the opportunity"),
        _ASSIGNEE,
        SchemaProperty("pipelineStage", description="Stage of the pipeline that the opportunity is in"),
        # MM/DD/YYYY or DD/MM/YYYY string, unlike the epoch dates elsewhere
        SchemaProperty("closeDate", from_key="close_date", hint=DATE, description="Close date"),
        SchemaProperty("monetaryValue", NUMBER, from_key="monetary_value", hint=CURRENCY, description="Expected value"),
        SchemaProperty("copperUrl", from_key="url", hint=URL, description="View Opportunity on Copper"),
        SchemaProperty("priority", description="Priority (None, Low, Medium, High)"),
        _TAGS,
        SchemaProperty("customerSource", description="Customer source"),
        SchemaProperty("details", description="Opportunity details"),
        SchemaProperty("lossReason", description="The reason for losing the opportunity"),
        SchemaProperty("pipeline", description="The pipeline the opportunity belongs to"),
        _INTERACTIONS,
        SchemaProperty("winProbability", NUMBER, from_key="win_probability", description="Probability of winning"),
        SchemaProperty("dateLastContacted", NUMBER, from_key="date_last_contacted", hint=DATE, description="Date of last contact"),
        _DATE_CREATED,
        _DATE_MODIFIED,
        SchemaProperty("primaryContactId", ID, from_key="primary_contact_id", description="Primary customer contact ID"),
        SchemaProperty("assigneeId", ID, from_key="assignee_id", description="Assignee ID on Copper"),
        SchemaProperty("companyId", ID, from_key="company_id", description="ID of the related company"),
        SchemaProperty("companyName", from_key="company_name", description="Name of the related company"),
        SchemaProperty("opportunityId", ID, from_key="id", description="Copper ID of the opportunity"),
    ),
)
# fmt: on

SCHEMAS: dict[RecordType, RecordSchema] = {
    RecordType.OPPORTUNITY: OPPORTUNITY_SCHEMA,
    RecordType.COMPANY: COMPANY_SCHEMA,
    RecordType.PERSON: PERSON_SCHEMA,
}


def schema_for(record_type: RecordType | str) -> RecordSchema:
    return SCHEMAS[RecordType(record_type)]


def _lookup(source: dict[str, Any], key: str) -> Any:
    """Read a possibly dotted key; _MISSING when any segment is absent."""
    if key in source:
        return source[key]
    value: Any = source
    for part in key.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def prune_to_schema(
    source: dict[str, Any],
    schema: RecordSchema,
    additional_keys: Optional[Iterable[str]] = None,
) -> dict[str, Any]:
    """
    Keep only schema properties (renamed from their source keys) plus any
    additional keys, such as dynamically discovered custom field names.
    Properties whose source key is absent are left out; ID properties are
    emitted as strings so they match reference stubs.
    """
    result: dict[str, Any] = {}
    for prop in schema.properties:
        value = _lookup(source, prop.source_key)
        if value is _MISSING:
            continue
        if prop.value_type == ID and value is not None:
            value = str(value)
        result[prop.name] = value
    for key in additional_keys or ():
        if key in source:
            result[key] = source[key]
    return result
