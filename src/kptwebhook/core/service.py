"""Service builder: exposes the webhook container inside the cluster."""

from kptwebhook.pacts.types import CompanionBuilder, WebhookConfig
from kptwebhook.core import names
from kptwebhook.core.constants import (
    DEFAULT_SERVICE_PORT, DEFAULT_TARGET_PORT, SERVICE_API_VERSION, SERVICE_KIND,
    WEBHOOK_PREFIX,
)


class ServiceBuilder(CompanionBuilder):
    """Build the ClusterIP Service the webhook configurations point at."""
    kind = SERVICE_KIND

    def name(self, config: WebhookConfig) -> str:
        return names.service_name(config.webhook)

    def build(self, config, crds):
        meta = config.webhook
        port = config.service.port or DEFAULT_SERVICE_PORT
        target_port = config.service.target_port or DEFAULT_TARGET_PORT
        return {
            "apiVersion": SERVICE_API_VERSION,
            "kind": SERVICE_KIND,
            "metadata": {
                "name": names.service_name(meta),
                "namespace": meta.namespace,
            },
            "spec": {
                "selector": {names.selector_label_key(): names.service_name(meta)},
                "ports": [{
                    "name": WEBHOOK_PREFIX,
                    "port": port,
                    "targetPort": target_port,
                    "protocol": "TCP",
                }],
            },
        }
