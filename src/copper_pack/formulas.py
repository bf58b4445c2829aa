"""Single-record getters and autocomplete sources."""

import asyncio
from typing import Any

from copper_pack.client import CopperClient
from copper_pack.constants import RecordType
from copper_pack.enrichment import enrich_record, find_by_id
from copper_pack.identifiers import resolve_expected


async def get_record(
    client: CopperClient,
    record_type: RecordType | str,
    url_or_id: str,
) -> dict[str, Any]:
    """
    Look up one record by URL or ID and enrich it.
    A URL for a different record type is rejected before any request.
    """
    record_type = RecordType(record_type)
    record_id = resolve_expected(url_or_id, record_type)
    body, refs = await asyncio.gather(
        client.get_record(record_type, record_id),
        client.reference.load_for(record_type),
    )
    # Single-record results have no host table to reference
    return enrich_record(record_type, body, refs, with_references=False)


async def get_opportunity(client: CopperClient, url_or_id: str) -> dict[str, Any]:
    return await get_record(client, RecordType.OPPORTUNITY, url_or_id)


async def get_company(client: CopperClient, url_or_id: str) -> dict[str, Any]:
    return await get_record(client, RecordType.COMPANY, url_or_id)


async def get_person(client: CopperClient, url_or_id: str) -> dict[str, Any]:
    return await get_record(client, RecordType.PERSON, url_or_id)


async def get_account_name(client: CopperClient) -> str:
    """Display name for the connection (the Copper account name)."""
    account = await client.reference.account()
    return account.name


async def loss_reason_names(client: CopperClient) -> list[str]:
    return [reason.name for reason in await client.reference.loss_reasons()]


async def user_emails(client: CopperClient) -> list[str]:
    return [user.email for user in await client.reference.users() if user.email]


async def pipeline_stage_names(client: CopperClient, url_or_id: str) -> list[str]:
    """Stages of the pipeline the given opportunity is in."""
    record_id = resolve_expected(url_or_id, RecordType.OPPORTUNITY)
    body, pipelines = await asyncio.gather(
        client.get_record(RecordType.OPPORTUNITY, record_id),
        client.reference.pipelines(),
    )
    pipeline = find_by_id(pipelines, body.get("pipeline_id"))
    return [stage.name for stage in pipeline.stages] if pipeline else []


async def custom_field_names(client: CopperClient, record_type: RecordType | str) -> list[str]:
    """Custom fields that can be set on records of this type."""
    record_type = RecordType(record_type)
    definitions = await client.reference.custom_field_definitions()
    return [d.name for d in definitions if d.applies_to(record_type.value)]
