"""Pytest fixtures for copper-pack tests."""

from typing import Any

import httpx
import pytest
import pytest_asyncio

from copper_pack.client import CopperClient
from copper_pack.config import CopperSettings
from copper_pack.constants import BASE_URL
from copper_pack.models.reference import ReferenceData

ACCOUNT_ID = "999"
API_HOST = "api.copper.com"


def api_path(endpoint: str) -> str:
    """URL path of an API endpoint, for respx routes that ignore query strings."""
    return "/developer_api/v1/" + endpoint


@pytest.fixture
def settings() -> CopperSettings:
    return CopperSettings(api_key="test-key", email="owner@example.com", page_size=2)


@pytest_asyncio.fixture
async def client(settings: CopperSettings):
    """Client with its own httpx transport; tests mock it with respx."""
    http = httpx.AsyncClient(base_url=BASE_URL)
    async with CopperClient(settings, client=http) as c:
        yield c
    await http.aclose()


@pytest.fixture
def users_body() -> list[dict[str, Any]]:
    return [
        {"id": 101, "name": "Ada Lovelace", "email": "ada@example.com"},
        {"id": 102, "name": "Grace Hopper", "email": "grace@example.com"},
    ]


@pytest.fixture
def pipelines_body() -> list[dict[str, Any]]:
    return [
        {
            "id": 11,
            "name": "Sales",
            "stages": [
                {"id": 111, "name": "Qualified", "win_probability": 10},
                {"id": 112, "name": "Proposal Sent", "win_probability": 50},
                {"id": 113, "name": "Negotiation", "win_probability": 80},
            ],
        },
        {"id": 12, "name": "Renewals", "stages": [{"id": 121, "name": "Up for renewal"}]},
    ]


@pytest.fixture
def loss_reasons_body() -> list[dict[str, Any]]:
    return [{"id": 31, "name": "Price"}, {"id": 32, "name": "Timing"}]


@pytest.fixture
def customer_sources_body() -> list[dict[str, Any]]:
    return [{"id": 41, "name": "Referral"}, {"id": 42, "name": "Website"}]


@pytest.fixture
def contact_types_body() -> list[dict[str, Any]]:
    return [{"id": 51, "name": "Customer"}, {"id": 52, "name": "Partner"}]


@pytest.fixture
def custom_fields_body() -> list[dict[str, Any]]:
    return [
        {"id": 61, "name": "Region", "data_type": "Dropdown", "available_on": ["opportunity", "company"],
         "options": [{"id": 611, "name": "EMEA"}, {"id": 612, "name": "Americas"}]},
        {"id": 62, "name": "Seats", "data_type": "Float", "available_on": ["opportunity"]},
        {"id": 63, "name": "Newsletter", "data_type": "Checkbox", "available_on": ["person"]},
        {"id": 64, "name": "Renewal Date", "data_type": "Date", "available_on": ["opportunity"]},
        {"id": 65, "name": "Products", "data_type": "MultiSelect", "available_on": ["opportunity"],
         "options": [{"id": 651, "name": "Core"}, {"id": 652, "name": "Add-on"}]},
    ]


@pytest.fixture
def reference_data(
    users_body,
    pipelines_body,
    loss_reasons_body,
    customer_sources_body,
    contact_types_body,
    custom_fields_body,
) -> ReferenceData:
    return ReferenceData.model_validate(
        {
            "account_id": ACCOUNT_ID,
            "users": users_body,
            "pipelines": pipelines_body,
            "loss_reasons": loss_reasons_body,
            "customer_sources": customer_sources_body,
            "contact_types": contact_types_body,
            "custom_field_definitions": custom_fields_body,
        }
    )


@pytest.fixture
def opportunity_body() -> dict[str, Any]:
    return {
        "id": 123456,
        "name": "Big Deal",
        "assignee_id": 101,
        "company_id": 20001,
        "company_name": "Acme Corp",
        "customer_source_id": 41,
        "loss_reason_id": None,
        "monetary_value": 5000,
        "pipeline_id": 11,
        "pipeline_stage_id": 112,
        "primary_contact_id": 30001,
        "priority": "High",
        "status": "Open",
        "tags": ["hot"],
        "win_probability": 50,
        "date_created": 1700000000,
        "custom_fields": [
            {"custom_field_definition_id": 61, "value": 611, "computed_value": "EMEA"},
            {"custom_field_definition_id": 62, "value": 25},
        ],
        "leads_converted_from": [],
    }


@pytest.fixture
def company_body() -> dict[str, Any]:
    return {
        "id": 20001,
        "name": "Acme Corp",
        "address": {"street": "123 Main St", "city": "SF", "state": "CA", "postal_code": "94105", "country": None},
        "assignee_id": "102",
        "contact_type_id": 51,
        "email_domain": "acme.example",
        "tags": [],
        "custom_fields": [],
    }


@pytest.fixture
def person_body() -> dict[str, Any]:
    return {
        "id": 30001,
        "name": "Jane Doe",
        "first_name": "Jane",
        "last_name": "Doe",
        "title": "CTO",
        "company_id": 20001,
        "company_name": "Acme Corp",
        "contact_type_id": 52,
        "assignee_id": None,
        "emails": [
            {"email": "jane@home.example", "category": "personal"},
            {"email": "jane@acme.example", "category": "work"},
        ],
        "address": {"city": "Oakland"},
        "tags": ["vip", "board"],
        "custom_fields": [{"custom_field_definition_id": 63, "value": True}],
    }


@pytest.fixture
def mock_reference(
    users_body,
    pipelines_body,
    loss_reasons_body,
    customer_sources_body,
    contact_types_body,
    custom_fields_body,
):
    """Install respx routes for every reference endpoint on a respx router."""

    def _install(router) -> dict[str, Any]:
        routes = {
            "users": router.post(host=API_HOST, path=api_path("users/search")).mock(
                return_value=httpx.Response(200, json=users_body)
            ),
            "account": router.get(host=API_HOST, path=api_path("account")).mock(
                return_value=httpx.Response(200, json={"id": int(ACCOUNT_ID), "name": "Acme Sales"})
            ),
        }
        for endpoint, body in (
            ("pipelines", pipelines_body),
            ("loss_reasons", loss_reasons_body),
            ("customer_sources", customer_sources_body),
            ("contact_types", contact_types_body),
            ("custom_field_definitions", custom_fields_body),
        ):
            routes[endpoint] = router.get(host=API_HOST, path=api_path(endpoint)).mock(
                return_value=httpx.Response(200, json=body)
            )
        return routes

    return _install
