"""Unit tests for models and record-type constants."""

import pytest
from pydantic import ValidationError

from copper_pack.constants import (
    RecordType,
    record_endpoint,
    record_type_from_web_token,
    record_type_info,
)
from copper_pack.models import CopperUser, CustomFieldDefinition, RawRecord, ReferenceData


class TestRecordTypes:
    """Tests for the record-type descriptor table."""

    def test_plurals(self) -> None:
        assert record_type_info("person").plural == "people"
        assert record_type_info(RecordType.COMPANY).plural == "companies"
        assert record_type_info(RecordType.OPPORTUNITY).plural == "opportunities"

    def test_web_tokens(self) -> None:
        assert record_type_from_web_token("contact") == RecordType.PERSON
        assert record_type_from_web_token("organization") == RecordType.COMPANY
        assert record_type_from_web_token("deal") == RecordType.OPPORTUNITY
        assert record_type_from_web_token("lead") is None

    def test_record_endpoint(self) -> None:
        assert record_endpoint("opportunity", "123456") == "opportunities/123456"

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown record type: lead"):
            record_type_info("lead")


class TestRawRecord:
    """Tests for RawRecord."""

    def test_id_as_string(self) -> None:
        assert RawRecord(data={"id": 123456}).id == "123456"
        assert RawRecord(data={}).id is None

    def test_frozen(self) -> None:
        record = RawRecord(data={"id": 1})
        with pytest.raises(ValidationError):
            record.data = {}


class TestReferenceModels:
    """Tests for reference data models."""

    def test_ids_normalized_to_strings(self) -> None:
        assert CopperUser(id=101, email="a@example.com").id == "101"
        assert ReferenceData(account_id=999).account_id == "999"
        assert ReferenceData().account_id is None

    def test_extra_fields_ignored(self) -> None:
        """Copper returns more keys than the models declare."""
        user = CopperUser.model_validate({"id": 1, "name": "A", "email": "a@example.com", "groups": []})
        assert user.name == "A"

    def test_custom_field_defaults(self) -> None:
        definition = CustomFieldDefinition.model_validate({"id": 61, "name": "Region"})
        assert definition.data_type == "String"
        assert definition.options == []
        assert not definition.applies_to("opportunity")
