"""Mutating actions on Copper records.

Every action resolves and type-checks the identifier, loads the reference data
it needs and validates its inputs before issuing a PUT, so neither a bad
argument nor a failed lookup leaves a partial change behind. Copper answers a
PUT with the full updated record, which is enriched (without cross-table
references) and returned.
"""

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

from copper_pack.client import CopperClient
from copper_pack.constants import STATUS_OPTIONS, RecordType
from copper_pack.enrichment import enrich_record, find_by_id
from copper_pack.errors import InvalidValueError, NotFoundError
from copper_pack.identifiers import resolve_expected
from copper_pack.models.reference import CustomFieldDefinition, ReferenceData
from copper_pack.text import human_readable_list, initial_capital, strip_and_lowercase

logger = logging.getLogger(__name__)

_NUMERIC_FIELD_TYPES = ("Float", "Number", "Currency", "Percentage")
_TRUE_VALUES = ("true", "yes", "y", "1", "checked", "x")
_FALSE_VALUES = ("false", "no", "n", "0", "unchecked")
_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%Y-%m-%dT%H:%M:%S")


def _api_id(value: str) -> int | str:
    """Copper expects numeric IDs in payloads."""
    return int(value) if value.isdigit() else value


def _choices(names: list[str]) -> str:
    """Hint appended to lookup errors."""
    if not names:
        return "There are none to choose from."
    return f"Try {human_readable_list(names)}."


async def _put_and_enrich(
    client: CopperClient,
    record_type: RecordType,
    record_id: str,
    payload: dict[str, Any],
    refs: ReferenceData,
) -> dict[str, Any]:
    """PUT the change and enrich the response with already loaded reference data."""
    logger.info("Updating %s %s: %s", record_type.value, record_id, sorted(payload))
    body = await client.update_record(record_type, record_id, payload)
    return enrich_record(record_type, body, refs, with_references=False)


async def update_opportunity_status(
    client: CopperClient,
    url_or_id: str,
    new_status: str,
    loss_reason: Optional[str] = None,
) -> dict[str, Any]:
    """
    Set status to Open, Won, Lost or Abandoned (any casing).
    A loss reason is only applied when the new status is Lost.
    """
    record_id = resolve_expected(url_or_id, RecordType.OPPORTUNITY)
    status = initial_capital(new_status or "")
    if status not in STATUS_OPTIONS:
        raise InvalidValueError(f"New status must be {human_readable_list(list(STATUS_OPTIONS))}")

    refs = await client.reference.load_for(RecordType.OPPORTUNITY)
    payload: dict[str, Any] = {"status": status}
    if loss_reason and status == "Lost":
        wanted = strip_and_lowercase(loss_reason)
        match = next((r for r in refs.loss_reasons if strip_and_lowercase(r.name) == wanted), None)
        if match is None:
            names = [r.name for r in refs.loss_reasons]
            if not names:
                raise InvalidValueError("This account has no loss reasons configured")
            raise InvalidValueError(f"Loss reason must be {human_readable_list(names)}")
        payload["loss_reason_id"] = _api_id(match.id)

    return await _put_and_enrich(client, RecordType.OPPORTUNITY, record_id, payload, refs)


async def update_opportunity_stage(client: CopperClient, url_or_id: str, stage: str) -> dict[str, Any]:
    """Move an opportunity to a named stage of the pipeline it is already in."""
    record_id = resolve_expected(url_or_id, RecordType.OPPORTUNITY)
    current, refs = await asyncio.gather(
        client.get_record(RecordType.OPPORTUNITY, record_id),
        client.reference.load_for(RecordType.OPPORTUNITY),
    )
    pipeline = find_by_id(refs.pipelines, current.get("pipeline_id"))
    if pipeline is None:
        raise NotFoundError(f"Couldn't find the pipeline for opportunity {record_id}")

    wanted = strip_and_lowercase(stage)
    match = next((s for s in pipeline.stages if strip_and_lowercase(s.name) == wanted), None)
    if match is None:
        names = [s.name for s in pipeline.stages]
        if not names:
            raise InvalidValueError(f"Pipeline {pipeline.name} has no stages")
        raise InvalidValueError(f"Stage must be {human_readable_list(names)}")
    return await _put_and_enrich(
        client, RecordType.OPPORTUNITY, record_id, {"pipeline_stage_id": _api_id(match.id)}, refs
    )


async def rename_opportunity(client: CopperClient, url_or_id: str, new_name: str) -> dict[str, Any]:
    record_id = resolve_expected(url_or_id, RecordType.OPPORTUNITY)
    name = (new_name or "").strip()
    if not name:
        raise InvalidValueError("New name can't be blank")
    refs = await client.reference.load_for(RecordType.OPPORTUNITY)
    return await _put_and_enrich(client, RecordType.OPPORTUNITY, record_id, {"name": name}, refs)


async def assign_record(
    client: CopperClient,
    record_type: RecordType | str,
    url_or_id: str,
    assignee_email: str,
) -> dict[str, Any]:
    """Assign a record to the Copper user with this email (case-insensitive)."""
    record_type = RecordType(record_type)
    record_id = resolve_expected(url_or_id, record_type)
    refs = await client.reference.load_for(record_type)
    wanted = (assignee_email or "").strip().lower()
    user = next((u for u in refs.users if (u.email or "").lower() == wanted), None)
    if user is None:
        emails = [u.email for u in refs.users if u.email]
        raise NotFoundError(
            f'Couldn\'t find a Copper user with the email address "{assignee_email}". {_choices(emails)}'
        )
    return await _put_and_enrich(client, record_type, record_id, {"assignee_id": _api_id(user.id)}, refs)


def apply_tag_change(tags: list[str], tag: str, *, remove: bool = False) -> list[str]:
    """
    New tag list after adding or removing one tag. Removal drops exact
    matches; adding a tag that is already present changes nothing.
    """
    if remove:
        return [t for t in tags if t != tag]
    if tag in tags:
        return list(tags)
    return [*tags, tag]


async def add_or_remove_tag(
    client: CopperClient,
    record_type: RecordType | str,
    url_or_id: str,
    tag: str,
    remove: bool = False,
) -> dict[str, Any]:
    """Copper replaces the whole tag list on PUT, so read it first."""
    record_type = RecordType(record_type)
    record_id = resolve_expected(url_or_id, record_type)
    tag = (tag or "").strip()
    if not tag:
        raise InvalidValueError("Tag can't be blank")
    current, refs = await asyncio.gather(
        client.get_record(record_type, record_id),
        client.reference.load_for(record_type),
    )
    tags = apply_tag_change(list(current.get("tags") or []), tag, remove=remove)
    return await _put_and_enrich(client, record_type, record_id, {"tags": tags}, refs)


async def add_tag(client: CopperClient, record_type: RecordType | str, url_or_id: str, tag: str) -> dict[str, Any]:
    return await add_or_remove_tag(client, record_type, url_or_id, tag)


async def remove_tag(client: CopperClient, record_type: RecordType | str, url_or_id: str, tag: str) -> dict[str, Any]:
    return await add_or_remove_tag(client, record_type, url_or_id, tag, remove=True)


def _option_id(definition: CustomFieldDefinition, name: str) -> int | str:
    wanted = strip_and_lowercase(name)
    for option in definition.options:
        if strip_and_lowercase(option.name) == wanted:
            return _api_id(option.id)
    raise InvalidValueError(
        f'"{name}" is not an option for {definition.name}. '
        f"{_choices([o.name for o in definition.options])}"
    )


def _parse_date(value: str) -> int:
    """Epoch seconds (UTC) from an ISO or US-style date, or a raw epoch number."""
    if value.isdigit():
        return int(value)
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return int(parsed.replace(tzinfo=timezone.utc).timestamp())
    raise InvalidValueError(f'Couldn\'t read "{value}" as a date. Use YYYY-MM-DD.')


def coerce_custom_field_value(definition: CustomFieldDefinition, value: Optional[str]) -> Any:
    """
    Convert user input to the shape Copper expects for this field type.
    An empty value clears the field.
    """
    value = (value or "").strip()
    if not value:
        return None

    data_type = definition.data_type
    if data_type in _NUMERIC_FIELD_TYPES:
        try:
            number = float(value.replace(",", "").rstrip("%"))
        except ValueError:
            raise InvalidValueError(f"{definition.name} must be a number") from None
        if not math.isfinite(number):
            raise InvalidValueError(f"{definition.name} must be a finite number")
        return number
    if data_type == "Checkbox":
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise InvalidValueError(f"{definition.name} must be true or false")
    if data_type == "Date":
        return _parse_date(value)
    if data_type == "Dropdown":
        return _option_id(definition, value)
    if data_type == "MultiSelect":
        return [_option_id(definition, part.strip()) for part in value.split(",") if part.strip()]
    if data_type == "Connect":
        raise InvalidValueError(f"{definition.name} is a Connect field, which can't be set here")
    return value


async def update_custom_field(
    client: CopperClient,
    record_type: RecordType | str,
    url_or_id: str,
    field_name: str,
    new_value: Optional[str],
) -> dict[str, Any]:
    """Set one custom field, looked up by name among fields available on this record type."""
    record_type = RecordType(record_type)
    record_id = resolve_expected(url_or_id, record_type)
    refs = await client.reference.load_for(record_type)
    definitions = [d for d in refs.custom_field_definitions if d.applies_to(record_type.value)]
    wanted = strip_and_lowercase(field_name)
    definition = next((d for d in definitions if strip_and_lowercase(d.name) == wanted), None)
    if definition is None:
        raise NotFoundError(
            f'Couldn\'t find a custom field named "{field_name}". '
            f"{_choices([d.name for d in definitions])}"
        )

    payload = {
        "custom_fields": [
            {
                "custom_field_definition_id": _api_id(definition.id),
                "value": coerce_custom_field_value(definition, new_value),
            }
        ]
    }
    return await _put_and_enrich(client, record_type, record_id, payload, refs)
