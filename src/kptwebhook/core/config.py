"""Function config decoding and validation."""

import yaml

from kptwebhook.pacts.helpers import dig, kind_of, resource_ref
from kptwebhook.pacts.types import (
    CertificateSpec, ContainerSpec, Result, ServiceSpec, WebhookConfig, WebhookMeta,
)
from kptwebhook.core.constants import (
    CONFIGMAP_WEBHOOK_KEY, FN_CONFIG_API_VERSION, FN_CONFIG_GROUP, FN_CONFIG_KIND,
    FN_CONFIG_VERSION, OPERATION_ADD, OPERATION_DELETE,
)
from kptwebhook.core.errors import ConfigError

_EXPECTED = f"`ConfigMap.v1` or `{FN_CONFIG_KIND}.{FN_CONFIG_VERSION}.{FN_CONFIG_GROUP}`"

_MAX_PORT = 65535


def _fail(errors: list | None, message: str) -> None:
    """Raise, or collect the error when the caller keeps decoding."""
    exc = ConfigError(message)
    if errors is None:
        raise exc
    errors.append(exc)


def _section(data: dict, key: str, errors: list | None) -> dict:
    """Return data[key] as a mapping; absent or invalid means empty."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        _fail(errors, f"function config field '{key}' must be a mapping, "
                      f"got {type(value).__name__}")
        return {}
    return value


def _string(section: dict, key: str, path: str, errors: list | None) -> str:
    """Read a string field; other scalars are taken in their YAML text form."""
    value = section.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    _fail(errors, f"function config field '{path}' must be a string, "
                  f"got {type(value).__name__}")
    return ""


def _port(section: dict, key: str, path: str, errors: list | None) -> int:
    value = section.get(key)
    if value is None:
        return 0
    # bool is an int subclass; `port: true` is not a port
    if isinstance(value, bool) or not isinstance(value, int):
        _fail(errors, f"function config field '{path}' must be an integer, "
                      f"got {value!r}")
        return 0
    return value


def config_from_dict(data: dict, errors: list | None = None) -> WebhookConfig:
    """Build a WebhookConfig from its document form (yaml/json field names).

    Without `errors` the first invalid field raises ConfigError. With a list,
    each invalid field is appended to it and left at its default while the
    remaining fields are still decoded.
    """
    if not isinstance(data, dict):
        _fail(errors, f"function config must be a mapping, got {type(data).__name__}")
        return WebhookConfig()
    webhook = _section(data, "webhook", errors)
    service = _section(data, "service", errors)
    certificate = _section(data, "certificate", errors)
    container = _section(data, "container", errors)
    return WebhookConfig(
        operation=_string(data, "operation", "operation", errors),
        webhook=WebhookMeta(
            name=_string(webhook, "name", "webhook.name", errors),
            namespace=_string(webhook, "namespace", "webhook.namespace", errors),
        ),
        service=ServiceSpec(
            port=_port(service, "port", "service.port", errors),
            target_port=_port(service, "targetPort", "service.targetPort", errors),
        ),
        certificate=CertificateSpec(
            issuer_ref=_string(certificate, "issuerRef", "certificate.issuerRef", errors),
        ),
        container=ContainerSpec(name=_string(container, "name", "container.name", errors)),
    )


def _is_configmap(fn_config: dict) -> bool:
    return kind_of(fn_config) == "ConfigMap" and fn_config.get("apiVersion") == "v1"


def _is_webhook_config(fn_config: dict) -> bool:
    return (kind_of(fn_config) == FN_CONFIG_KIND
            and fn_config.get("apiVersion") == FN_CONFIG_API_VERSION)


def decode_config(fn_config: dict | None, errors: list | None = None) -> WebhookConfig:
    """Decode either accepted function config shape into a WebhookConfig.

    A `ConfigMap.v1` carries the config as YAML text under `data.webhook`;
    a `Webhook.v1alpha1.fn.kpt.dev` carries the fields at its top level.
    Field-level problems go to `errors` when given (see config_from_dict);
    an unusable function config always raises.
    """
    if not fn_config:
        raise ConfigError(f"FunctionConfig is missing. Expect {_EXPECTED}")
    if not isinstance(fn_config, dict):
        raise ConfigError(f"FunctionConfig must be a mapping. Expect {_EXPECTED}")

    if _is_configmap(fn_config):
        text = dig(fn_config, "data", CONFIGMAP_WEBHOOK_KEY, default="")
        if not text:
            return WebhookConfig()
        if not isinstance(text, str):
            raise ConfigError(f"ConfigMap data.{CONFIGMAP_WEBHOOK_KEY} must be a string")
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"cannot unmarshal function config configmap: {exc}") from exc
        return config_from_dict(data or {}, errors)

    if _is_webhook_config(fn_config):
        return config_from_dict(fn_config, errors)

    raise ConfigError(
        f"unknown functionConfig Kind={kind_of(fn_config)} "
        f"ApiVersion={fn_config.get('apiVersion', '')}, expect {_EXPECTED}")


def validate_config(config: WebhookConfig) -> None:
    """Check required fields; raise ConfigError for the first problem found."""
    if not config.webhook.name:
        raise ConfigError("webhook name is required")
    if not config.webhook.namespace:
        raise ConfigError("webhook namespace is required")
    if not config.container.name:
        raise ConfigError("webhook container name is required")
    if config.operation == OPERATION_DELETE:
        return
    if config.operation == OPERATION_ADD:
        if not config.certificate.issuer_ref:
            raise ConfigError("webhook certificate issuerRef is required")
        for path, port in (("service.port", config.service.port),
                           ("service.targetPort", config.service.target_port)):
            if not 0 <= port <= _MAX_PORT:
                raise ConfigError(f"{path} must be between 0 and {_MAX_PORT} "
                                  f"(0 selects the default), got {port}")
        return
    raise ConfigError(f"operation should be {OPERATION_ADD} or {OPERATION_DELETE}, "
                      f"got {config.operation!r}")


def load_config(fn_config: dict | None) -> tuple[WebhookConfig, list[Result]]:
    """Decode and validate, returning the config plus any errors found.

    Errors do not stop processing: a field that cannot be decoded keeps its
    default, and the caller runs the transform with everything else.
    """
    results: list[Result] = []
    ref = resource_ref(fn_config)
    errors: list[ConfigError] = []
    try:
        config = decode_config(fn_config, errors)
    except ConfigError as exc:
        errors.append(exc)
        config = WebhookConfig()
    try:
        validate_config(config)
    except ConfigError as exc:
        errors.append(exc)
    results.extend(Result(message=str(exc), resource_ref=ref) for exc in errors)
    return config, results
