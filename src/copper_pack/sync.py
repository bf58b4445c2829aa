"""Page-by-page sync of Copper records with continuation tokens.

Each call fetches one page plus the reference data needed to enrich it, and
returns a continuation for the next page only when the page came back full.
The host decides how long to keep calling; there is no page limit here.
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Optional

from pydantic import BaseModel, ConfigDict, Field

from copper_pack.client import CopperClient
from copper_pack.constants import RecordType
from copper_pack.enrichment import enrich_record
from copper_pack.models.raw import RawRecord

logger = logging.getLogger(__name__)


class Continuation(BaseModel):
    """State carried between sync calls. Serialized as {"pageNumber": n}."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    page_number: int = Field(default=1, ge=1, alias="pageNumber")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def next(self) -> "Continuation":
        return Continuation(page_number=self.page_number + 1)


class SyncResult(BaseModel):
    result: list[dict[str, Any]] = Field(default_factory=list)
    continuation: Optional[Continuation] = None


def _coerce_continuation(continuation: Continuation | dict | None) -> Continuation:
    if continuation is None:
        return Continuation()
    if isinstance(continuation, Continuation):
        return continuation
    return Continuation.model_validate(continuation)


async def sync_records(
    client: CopperClient,
    record_type: RecordType | str,
    continuation: Continuation | dict | None = None,
) -> SyncResult:
    """
    Fetch and enrich one page. A page shorter than the page size (including
    an empty page) ends the enumeration; a full page yields page_number + 1.
    """
    record_type = RecordType(record_type)
    state = _coerce_continuation(continuation)
    page_size = client.settings.page_size

    records, refs = await asyncio.gather(
        client.search_records(record_type, page_number=state.page_number, page_size=page_size),
        client.reference.load_for(record_type),
    )

    result = [
        enrich_record(record_type, RawRecord(data=record), refs, with_references=True)
        for record in records
    ]
    next_state = state.next() if len(records) == page_size else None
    logger.info(
        "Synced %s page %d: %d records%s",
        record_type.value,
        state.page_number,
        len(records),
        "" if next_state else " (last page)",
    )
    return SyncResult(result=result, continuation=next_state)


async def sync_opportunities(client: CopperClient, continuation: Continuation | dict | None = None) -> SyncResult:
    return await sync_records(client, RecordType.OPPORTUNITY, continuation)


async def sync_companies(client: CopperClient, continuation: Continuation | dict | None = None) -> SyncResult:
    return await sync_records(client, RecordType.COMPANY, continuation)


async def sync_people(client: CopperClient, continuation: Continuation | dict | None = None) -> SyncResult:
    return await sync_records(client, RecordType.PERSON, continuation)


async def iterate_records(
    client: CopperClient,
    record_type: RecordType | str,
    *,
    max_pages: Optional[int] = None,
) -> AsyncIterator[dict[str, Any]]:
    """Drive sync_records until no continuation is returned (or max_pages is hit)."""
    continuation: Optional[Continuation] = None
    pages = 0
    while True:
        page = await sync_records(client, record_type, continuation)
        pages += 1
        for record in page.result:
            yield record
        continuation = page.continuation
        if continuation is None:
            break
        if max_pages is not None and pages >= max_pages:
            break
