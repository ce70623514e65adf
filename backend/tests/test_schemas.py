"""Tests for the General settings form rules and request schemas."""

import pytest
from pydantic import ValidationError

from app.schemas.redis import (
    FIELD_LABELS,
    FIELD_RULES,
    RedisExposureUpdate,
    RedisGeneralForm,
    RedisGeneralUpdate,
    field_label,
    format_validation_errors,
)


def valid_form_data(**overrides) -> dict:
    data = {
        "name": "cache",
        "description": None,
        "redis_conf": None,
        "redis_username": "default",
        "redis_password": "s3cret",
        "image": "redis:7.2",
        "ports_mappings": None,
        "is_public": False,
        "public_port": None,
        "is_log_drain_enabled": None,
        "custom_docker_run_options": None,
    }
    data.update(overrides)
    return data


def form_errors(**overrides) -> dict[str, list[str]]:
    with pytest.raises(ValidationError) as exc_info:
        RedisGeneralForm.model_validate(valid_form_data(**overrides))
    return format_validation_errors(exc_info.value)


class TestRuleTable:
    def test_every_form_field_has_a_rule(self):
        assert set(FIELD_RULES) == set(RedisGeneralForm.model_fields)

    def test_required_fields(self):
        required = {field for field, rule in FIELD_RULES.items() if rule == "required"}
        assert required == {"name", "redis_username", "redis_password", "image"}

    def test_labels(self):
        assert field_label("ports_mappings") == "Port Mapping"
        assert field_label("custom_docker_run_options") == "Custom Docker Options"
        assert "is_log_drain_enabled" not in FIELD_LABELS
        assert field_label("is_log_drain_enabled") == "is log drain enabled"


class TestRedisGeneralForm:
    def test_nullable_fields_accept_none(self):
        form = RedisGeneralForm.model_validate(valid_form_data(is_public=None))
        assert form.is_public is None

    @pytest.mark.parametrize("field", ["name", "redis_username", "redis_password", "image"])
    def test_missing_required_field(self, field):
        data = valid_form_data()
        del data[field]

        with pytest.raises(ValidationError) as exc_info:
            RedisGeneralForm.model_validate(data)

        errors = format_validation_errors(exc_info.value)
        assert errors == {field: [f"The {FIELD_LABELS[field]} field is required."]}

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_required_field(self, value):
        assert form_errors(image=value) == {"image": ["The Image field is required."]}

    def test_integer_rule(self):
        assert form_errors(public_port="six") == {
            "public_port": ["The Public Port field must be an integer."]
        }

    def test_integer_string_is_coerced(self):
        form = RedisGeneralForm.model_validate(valid_form_data(public_port="16379"))
        assert form.public_port == 16379

    def test_boolean_rule(self):
        assert form_errors(is_public="maybe") == {
            "is_public": ["The Is Public field must be true or false."]
        }

    def test_multiple_errors_are_collected(self):
        errors = form_errors(name="", public_port="six")
        assert set(errors) == {"name", "public_port"}

    def test_other_type_errors_are_invalid(self):
        assert form_errors(redis_conf=["not", "text"]) == {
            "redis_conf": ["The Redis Configuration field is invalid."]
        }


class TestRequestSchemas:
    def test_update_has_no_toggle_fields(self):
        assert "is_public" not in RedisGeneralUpdate.model_fields
        assert "is_log_drain_enabled" not in RedisGeneralUpdate.model_fields

    def test_update_keeps_only_sent_fields(self):
        data = RedisGeneralUpdate.model_validate({"redis_password": "n3w"})
        assert data.model_dump(exclude_unset=True) == {"redis_password": "n3w"}

    @pytest.mark.parametrize("port", [0, 65536])
    def test_exposure_port_range(self, port):
        with pytest.raises(ValidationError):
            RedisExposureUpdate(is_public=True, public_port=port)

    def test_exposure_port_is_optional(self):
        data = RedisExposureUpdate(is_public=False)
        assert data.public_port is None
        assert "public_port" not in data.model_fields_set
