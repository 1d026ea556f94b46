"""Canonical names, labels and DNS names of the companion resources.

Every function is pure: the same webhook identity always yields the same
names, which is what lets a later pass find what an earlier one created.
"""

import posixpath

from kptwebhook.pacts.types import WebhookMeta
from kptwebhook.core.constants import (
    CERT_INJECTION_KEY, CERT_PATH_SUFFIX, CERT_SUFFIX, MUTATING_SUFFIX,
    SELECTOR_LABEL_KEY, SERVICE_SUFFIX, VALIDATING_SUFFIX, WEBHOOK_PREFIX,
)


def base_name(meta: WebhookMeta) -> str:
    """webhook-<name>; also the name of the injected volume."""
    return f"{WEBHOOK_PREFIX}-{meta.name}"


def service_name(meta: WebhookMeta) -> str:
    return f"{base_name(meta)}-{SERVICE_SUFFIX}"


def certificate_name(meta: WebhookMeta) -> str:
    """Name of both the Certificate and the Secret it produces."""
    return f"{base_name(meta)}-{CERT_SUFFIX}"


def mutating_configuration_name(meta: WebhookMeta) -> str:
    return f"{base_name(meta)}-{MUTATING_SUFFIX}"


def validating_configuration_name(meta: WebhookMeta) -> str:
    return f"{base_name(meta)}-{VALIDATING_SUFFIX}"


def selector_label_key() -> str:
    return SELECTOR_LABEL_KEY


def dns_name(meta: WebhookMeta, *extra: str) -> str:
    """<service>.<namespace>.svc, followed by any extra labels.

    dns_name(meta, "cluster", "local") gives the cluster-local FQDN.
    """
    return ".".join([service_name(meta), meta.namespace, SERVICE_SUFFIX, *extra])


def certificate_annotation(meta: WebhookMeta) -> dict[str, str]:
    """cert-manager CA injection annotation pointing at the serving cert."""
    return {CERT_INJECTION_KEY: f"{meta.namespace}/{certificate_name(meta)}"}


def cert_mount_path() -> str:
    """Directory the webhook server reads its serving certificate from."""
    return posixpath.join("/tmp", f"k8s-{WEBHOOK_PREFIX}-server", CERT_PATH_SUFFIX)


def mutating_webhook_name(crd_singular: str, crd_group: str) -> str:
    return f"m{crd_singular}.{crd_group}"


def validating_webhook_name(crd_singular: str, crd_group: str) -> str:
    return f"v{crd_singular}.{crd_group}"


def admission_path(action: str, crd_group: str, crd_version: str, crd_singular: str) -> str:
    """/<action>-<group with dashes>-<version>-<singular>, as served by controller-runtime."""
    return "-".join([f"/{action}", crd_group.replace(".", "-"), crd_version, crd_singular])
