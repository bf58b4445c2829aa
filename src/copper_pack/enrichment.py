"""Enrich raw Copper records with reference data.

Enrichment never mutates the raw record. Each enrich_* function computes a
separate map of resolved names and synthesized fields, merges it over the raw
body, and prunes the result to the record type's schema. A missing
cross-reference (unknown user, stale pipeline id, ...) leaves the field empty
instead of failing, so one bad record cannot break a whole sync page.
"""

from typing import Any, Callable, Iterable, Optional, TypeVar

from copper_pack.constants import WEB_HOST, RecordType, record_type_info
from copper_pack.models.raw import RawRecord
from copper_pack.models.reference import CopperUser, CustomFieldDefinition, ReferenceData
from copper_pack.schemas import prune_to_schema, schema_for

# Placeholder display name for reference stubs; the host replaces it once the
# stub matches a row in the related table
UNRESOLVED_NAME = "Not found"

_ADDRESS_PARTS = ("street", "city", "state", "country", "postal_code")

T = TypeVar("T")


def _same_id(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


def find_by_id(items: Iterable[T], item_id: Any) -> Optional[T]:
    """First item whose id equals item_id, compared as strings."""
    for item in items:
        if _same_id(getattr(item, "id", None), item_id):
            return item
    return None


def concatenate_address(address: Optional[dict[str, Any]]) -> str:
    """Join the present address components with ", "."""
    if not address:
        return ""
    return ", ".join(str(address[part]) for part in _ADDRESS_PARTS if address.get(part))


def record_web_url(
    account_id: Optional[str],
    record_type: RecordType | str,
    record_id: Optional[str],
) -> Optional[str]:
    """Link to the record's page in the Copper web app."""
    if not account_id or not record_id:
        return None
    token = record_type_info(record_type).web_token
    return f"https://{WEB_HOST}/companies/{account_id}/app#/{token}/{record_id}"


def resolve_assignee(assignee_id: Any, users: list[CopperUser]) -> dict[str, Optional[str]]:
    """
    Person-shaped assignee object; the host matches it to a real user by email.
    """
    user = find_by_id(users, assignee_id)
    return {
        "id": None if assignee_id is None else str(assignee_id),
        "email": user.email if user else None,
        "name": user.name if user else None,
    }


def prepare_custom_fields(
    definitions: list[CustomFieldDefinition],
    entries: Optional[list[dict[str, Any]]],
) -> dict[str, Any]:
    """
    Map a record's custom_fields array to {definition name: value}.
    computed_value (e.g. dropdown labels instead of option ids) wins over value.
    """
    prepared: dict[str, Any] = {}
    for entry in entries or []:
        definition = find_by_id(definitions, entry.get("custom_field_definition_id"))
        if definition is None:
            continue
        computed = entry.get("computed_value")
        prepared[definition.name] = computed if computed is not None else entry.get("value")
    return prepared


def _name_of(items: Iterable[Any], item_id: Any) -> Optional[str]:
    item = find_by_id(items, item_id)
    return item.name if item else None


def _primary_email(emails: Optional[list[dict[str, Any]]]) -> Optional[str]:
    """First "work" email, else the first email."""
    if not emails:
        return None
    for email in emails:
        if email.get("category") == "work" and email.get("email"):
            return email["email"]
    return emails[0].get("email")


def _finish(
    raw: RawRecord,
    record_type: RecordType,
    enriched: dict[str, Any],
    refs: ReferenceData,
) -> dict[str, Any]:
    """Merge computed and custom fields over the raw body, then prune."""
    custom = prepare_custom_fields(refs.custom_field_definitions, raw.get("custom_fields"))
    merged = {**raw.data, **enriched, **custom}
    return prune_to_schema(merged, schema_for(record_type), additional_keys=custom.keys())


def enrich_opportunity(
    raw: RawRecord,
    refs: ReferenceData,
    *,
    with_references: bool = False,
) -> dict[str, Any]:
    """
    Resolve assignee, pipeline, stage, customer source and loss reason.
    with_references adds company and primary contact stubs (sync tables only).
    """
    enriched: dict[str, Any] = {
        "url": record_web_url(refs.account_id, RecordType.OPPORTUNITY, raw.id),
        "assignee": resolve_assignee(raw.get("assignee_id"), refs.users),
    }

    pipeline = find_by_id(refs.pipelines, raw.get("pipeline_id"))
    enriched["pipeline"] = pipeline.name if pipeline else None
    enriched["pipelineStage"] = (
        _name_of(pipeline.stages, raw.get("pipeline_stage_id")) if pipeline else None
    )
    enriched["customerSource"] = _name_of(refs.customer_sources, raw.get("customer_source_id"))
    enriched["lossReason"] = _name_of(refs.loss_reasons, raw.get("loss_reason_id"))

    if with_references:
        if raw.get("company_id"):
            enriched["company"] = {
                "id": str(raw.get("company_id")),
                "name": raw.get("company_name"),
            }
        if raw.get("primary_contact_id"):
            # Fetching the real name would cost a request per row
            enriched["primaryContact"] = {
                "id": str(raw.get("primary_contact_id")),
                "fullName": UNRESOLVED_NAME,
            }

    return _finish(raw, RecordType.OPPORTUNITY, enriched, refs)


def enrich_company(
    raw: RawRecord,
    refs: ReferenceData,
    *,
    with_references: bool = False,
) -> dict[str, Any]:
    """
    Resolve assignee and contact type; synthesize address and URL.
    Companies point at no other table, so with_references adds nothing; it is
    accepted to keep the ENRICHERS signature uniform.
    """
    enriched: dict[str, Any] = {
        "fullAddress": concatenate_address(raw.get("address")),
        "url": record_web_url(refs.account_id, RecordType.COMPANY, raw.id),
        "assignee": resolve_assignee(raw.get("assignee_id"), refs.users),
        "contactType": _name_of(refs.contact_types, raw.get("contact_type_id")),
    }
    return _finish(raw, RecordType.COMPANY, enriched, refs)


def enrich_person(
    raw: RawRecord,
    refs: ReferenceData,
    *,
    with_references: bool = False,
) -> dict[str, Any]:
    """Like enrich_company, plus primary email and (with_references) a company stub."""
    enriched: dict[str, Any] = {
        "fullAddress": concatenate_address(raw.get("address")),
        "url": record_web_url(refs.account_id, RecordType.PERSON, raw.id),
        "assignee": resolve_assignee(raw.get("assignee_id"), refs.users),
        "contactType": _name_of(refs.contact_types, raw.get("contact_type_id")),
        "primaryEmail": _primary_email(raw.get("emails")),
    }
    if with_references and raw.get("company_id"):
        enriched["company"] = {
            "id": str(raw.get("company_id")),
            "name": raw.get("company_name"),
        }
    return _finish(raw, RecordType.PERSON, enriched, refs)


Enricher = Callable[..., dict[str, Any]]

ENRICHERS: dict[RecordType, Enricher] = {
    RecordType.OPPORTUNITY: enrich_opportunity,
    RecordType.COMPANY: enrich_company,
    RecordType.PERSON: enrich_person,
}


def enrich_record(
    record_type: RecordType | str,
    raw: RawRecord | dict[str, Any],
    refs: ReferenceData,
    *,
    with_references: bool = False,
) -> dict[str, Any]:
    """Dispatch to the enricher for record_type; accepts a RawRecord or a plain body."""
    if not isinstance(raw, RawRecord):
        raw = RawRecord(data=raw)
    return ENRICHERS[RecordType(record_type)](raw, refs, with_references=with_references)
