"""Unit tests for function config decoding and validation."""

import pytest
import yaml

from kptwebhook.core.config import (
    config_from_dict, decode_config, load_config, validate_config,
)
from kptwebhook.core.errors import ConfigError

from conftest import webhook_fields


def configmap(body):
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": "webhook-config"},
        "data": {"webhook": body},
    }


def typed(fields):
    return {"apiVersion": "fn.kpt.dev/v1alpha1", "kind": "Webhook",
            "metadata": {"name": "webhook-config"}, **fields}


class TestDecodeConfig:
    """Both accepted function config shapes decode to the same model."""

    def test_configmap_embedded_yaml(self):
        config = decode_config(configmap(yaml.safe_dump(webhook_fields())))
        assert config.operation == "add"
        assert config.webhook.name == "foo"
        assert config.webhook.namespace == "bar"
        assert config.service.port == 443
        assert config.service.target_port == 9443
        assert config.certificate.issuer_ref == "selfsigned"
        assert config.container.name == "manager"

    def test_typed_webhook_document(self):
        assert decode_config(typed(webhook_fields())) == decode_config(
            configmap(yaml.safe_dump(webhook_fields())))

    def test_configmap_without_webhook_key_is_empty(self):
        config = decode_config({"apiVersion": "v1", "kind": "ConfigMap", "data": {}})
        assert config.operation == ""
        assert config.webhook.name == ""

    def test_missing_function_config(self):
        with pytest.raises(ConfigError) as exc_info:
            decode_config(None)
        assert "FunctionConfig is missing" in str(exc_info.value)

    def test_unknown_kind_names_accepted_shapes(self):
        with pytest.raises(ConfigError) as exc_info:
            decode_config({"apiVersion": "v1", "kind": "Secret"})
        message = str(exc_info.value)
        assert "Kind=Secret" in message
        assert "ConfigMap.v1" in message
        assert "Webhook.v1alpha1.fn.kpt.dev" in message

    def test_malformed_embedded_yaml(self):
        with pytest.raises(ConfigError) as exc_info:
            decode_config(configmap("operation: [add"))
        assert "cannot unmarshal" in str(exc_info.value)

    def test_non_integer_port(self):
        fields = webhook_fields()
        fields["service"]["port"] = "https"
        with pytest.raises(ConfigError) as exc_info:
            config_from_dict(fields)
        assert "service.port" in str(exc_info.value)

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError):
            config_from_dict({"webhook": "foo"})


class TestValidateConfig:
    """Validation runs in a fixed order and stops at the first failure."""

    def test_valid_add(self):
        validate_config(config_from_dict(webhook_fields("add")))  # Should not raise

    def test_delete_without_issuer_is_accepted(self):
        validate_config(config_from_dict(webhook_fields("delete", issuer="")))

    def test_add_without_issuer_is_rejected(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config(config_from_dict(webhook_fields("add", issuer="")))
        assert "issuerRef" in str(exc_info.value)

    @pytest.mark.parametrize("operation", ["", "ADD", "remove"])
    def test_unknown_operation_is_rejected(self, operation):
        with pytest.raises(ConfigError) as exc_info:
            validate_config(config_from_dict(webhook_fields(operation)))
        assert "operation should be add or delete" in str(exc_info.value)

    def test_missing_name_reported_first(self):
        fields = webhook_fields("bogus", container="")
        fields["webhook"]["name"] = ""
        with pytest.raises(ConfigError) as exc_info:
            validate_config(config_from_dict(fields))
        assert str(exc_info.value) == "webhook name is required"

    def test_missing_namespace(self):
        fields = webhook_fields()
        fields["webhook"]["namespace"] = ""
        with pytest.raises(ConfigError) as exc_info:
            validate_config(config_from_dict(fields))
        assert "namespace" in str(exc_info.value)

    def test_missing_container_before_operation_checks(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config(config_from_dict(webhook_fields("ADD", container="")))
        assert "container" in str(exc_info.value)

    def test_port_out_of_range(self):
        fields = webhook_fields()
        fields["service"]["targetPort"] = 70000
        with pytest.raises(ConfigError) as exc_info:
            validate_config(config_from_dict(fields))
        assert "service.targetPort" in str(exc_info.value)

    def test_zero_ports_are_accepted(self):
        fields = webhook_fields()
        fields["service"] = {}
        validate_config(config_from_dict(fields))


class TestLoadConfig:
    """load_config reports problems instead of raising."""

    def test_valid_config_has_no_results(self):
        config, results = load_config(typed(webhook_fields()))
        assert results == []
        assert config.webhook.name == "foo"

    def test_invalid_config_is_reported_and_decoded(self):
        config, results = load_config(typed(webhook_fields("add", issuer="")))
        assert len(results) == 1
        assert results[0].is_error
        assert results[0].resource_ref["kind"] == "Webhook"
        # Decoded fields are still available for a best-effort transform
        assert config.container.name == "manager"

    def test_unknown_shape_reports_decode_and_validation_errors(self):
        config, results = load_config({"apiVersion": "v1", "kind": "Secret"})
        assert [r.is_error for r in results] == [True, True]
        assert "unknown functionConfig" in results[0].message
        assert results[1].message == "webhook name is required"
        assert config.operation == ""

    def test_bad_port_keeps_other_fields(self):
        fields = webhook_fields()
        fields["service"]["port"] = "https"
        config, results = load_config(typed(fields))
        assert [r.message for r in results] == [
            "function config field 'service.port' must be an integer, got 'https'",
        ]
        assert config.webhook.name == "foo"
        assert config.webhook.namespace == "bar"
        assert config.container.name == "manager"
        assert config.service.port == 0
        assert config.service.target_port == 9443

    def test_every_bad_field_is_reported(self):
        fields = webhook_fields()
        fields["service"] = {"port": "https", "targetPort": [1]}
        fields["container"] = "manager"
        config, results = load_config(configmap(yaml.safe_dump(fields)))
        messages = [r.message for r in results]
        assert "function config field 'service.port' must be an integer, got 'https'" in messages
        assert "function config field 'service.targetPort' must be an integer, got [1]" in messages
        assert "function config field 'container' must be a mapping, got str" in messages
        # Validation still runs on what was decoded
        assert messages[-1] == "webhook container name is required"
        assert config.webhook.name == "foo"

    def test_scalar_string_fields_read_as_text(self):
        fields = webhook_fields()
        fields["webhook"]["name"] = 123
        fields["certificate"]["issuerRef"] = True
        config, results = load_config(typed(fields))
        assert results == []
        assert config.webhook.name == "123"
        assert config.certificate.issuer_ref == "true"
