"""Certificate builder — requests the webhook serving certificate from cert-manager."""

from kptwebhook.pacts.types import CompanionBuilder, WebhookConfig
from kptwebhook.core import names
from kptwebhook.core.constants import CERTIFICATE_API_VERSION, CERTIFICATE_KIND


class CertificateBuilder(CompanionBuilder):
    """Build a cert-manager Certificate valid for both Service DNS names."""
    kind = CERTIFICATE_KIND

    def name(self, config: WebhookConfig) -> str:
        return names.certificate_name(config.webhook)

    def build(self, config, crds):
        meta = config.webhook
        cert_name = names.certificate_name(meta)
        return {
            "apiVersion": CERTIFICATE_API_VERSION,
            "kind": CERTIFICATE_KIND,
            "metadata": {
                "name": cert_name,
                "namespace": meta.namespace,
            },
            "spec": {
                "dnsNames": [
                    names.dns_name(meta),
                    names.dns_name(meta, "cluster", "local"),
                ],
                "issuerRef": {
                    "kind": "Issuer",
                    "name": config.certificate.issuer_ref,
                },
                # The secret shares the certificate's name; the volume mounts it
                "secretName": cert_name,
            },
        }
