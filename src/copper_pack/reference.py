"""Loads long-lived account configuration used to enrich records."""

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Literal, Optional

from copper_pack.constants import PAGE_SIZE, USERS_PAGE_SIZE, RecordType
from copper_pack.models.reference import (
    CopperAccount,
    CopperUser,
    CustomFieldDefinition,
    NamedItem,
    Pipeline,
    ReferenceData,
)

if TYPE_CHECKING:
    from copper_pack.client import CopperClient

logger = logging.getLogger(__name__)

BasicEndpoint = Literal[
    "pipelines",
    "customer_sources",
    "loss_reasons",
    "account",
    "contact_types",
    "custom_field_definitions",
]


class ReferenceLoader:
    """
    Fetches reference collections in one call each (no pagination; they are
    bounded by account configuration, not data volume). GET collections ride
    on the client's TTL cache. The user list comes from a POST search, which
    the client never caches, so it is memoized here instead.
    """

    def __init__(self, client: "CopperClient"):
        self._client = client
        self._users: Optional[tuple[float, list[CopperUser]]] = None

    async def load_basic(self, endpoint: BasicEndpoint) -> Any:
        """Usually a list of objects; `account` is a single object."""
        response = await self._client.call(
            endpoint,
            "GET",
            {"page_size": PAGE_SIZE},
            cache_ttl=self._client.settings.reference_ttl,
        )
        return response.body

    async def pipelines(self) -> list[Pipeline]:
        return [Pipeline.model_validate(p) for p in await self.load_basic("pipelines") or []]

    async def customer_sources(self) -> list[NamedItem]:
        return [NamedItem.model_validate(s) for s in await self.load_basic("customer_sources") or []]

    async def loss_reasons(self) -> list[NamedItem]:
        return [NamedItem.model_validate(r) for r in await self.load_basic("loss_reasons") or []]

    async def contact_types(self) -> list[NamedItem]:
        return [NamedItem.model_validate(t) for t in await self.load_basic("contact_types") or []]

    async def custom_field_definitions(self) -> list[CustomFieldDefinition]:
        body = await self.load_basic("custom_field_definitions") or []
        return [CustomFieldDefinition.model_validate(d) for d in body]

    async def account(self) -> CopperAccount:
        return CopperAccount.model_validate(await self.load_basic("account"))

    async def users(self) -> list[CopperUser]:
        """All users in the account (Copper caps search pages at 200)."""
        if self._users is not None:
            expires_at, users = self._users
            if time.monotonic() < expires_at:
                return users

        response = await self._client.call("users/search", "POST", {"page_size": USERS_PAGE_SIZE})
        users = [CopperUser.model_validate(u) for u in response.body or []]
        logger.debug("Loaded %d Copper users", len(users))
        ttl = self._client.settings.users_ttl
        self._users = (time.monotonic() + ttl, users) if ttl > 0 else None
        return users

    async def load_for(self, record_type: RecordType | str) -> ReferenceData:
        """
        Fetch, concurrently, the datasets enrichment of this record type needs.
        Users, account and custom field definitions are always loaded.
        """
        record_type = RecordType(record_type)
        if record_type == RecordType.OPPORTUNITY:
            users, account, definitions, pipelines, sources, reasons = await asyncio.gather(
                self.users(),
                self.account(),
                self.custom_field_definitions(),
                self.pipelines(),
                self.customer_sources(),
                self.loss_reasons(),
            )
            return ReferenceData(
                account_id=account.id,
                users=users,
                custom_field_definitions=definitions,
                pipelines=pipelines,
                customer_sources=sources,
                loss_reasons=reasons,
            )

        users, account, definitions, contact_types = await asyncio.gather(
            self.users(),
            self.account(),
            self.custom_field_definitions(),
            self.contact_types(),
        )
        return ReferenceData(
            account_id=account.id,
            users=users,
            custom_field_definitions=definitions,
            contact_types=contact_types,
        )
