"""Mutating/Validating webhook configuration builders.

One webhook entry is emitted per (CRD, served version) pair found in the
resource list; all entries of a kind are bundled into a single
configuration resource annotated for cert-manager CA injection.
"""

from kptwebhook.pacts.types import CompanionBuilder, WebhookConfig
from kptwebhook.core import names
from kptwebhook.core.constants import ADMISSION_API_VERSION, MUTATING_KIND, VALIDATING_KIND
from kptwebhook.core.crd import inspect_crd
from kptwebhook.core.errors import ContractError

RULE_OPERATIONS = ["CREATE", "UPDATE"]
FAILURE_POLICY = "Fail"
SIDE_EFFECTS = "None"
ADMISSION_REVIEW_VERSIONS = ["v1"]


class _WebhookConfigurationBuilder(CompanionBuilder):
    """Shared shape of both admission webhook configuration builders."""
    action = ""

    def entry_name(self, crd_singular: str, crd_group: str) -> str:
        raise NotImplementedError

    def _check_crds(self, crds) -> None:
        if not isinstance(crds, (list, tuple)):
            raise ContractError(
                f"{type(self).__name__} expects a list of CRD documents, "
                f"got {type(crds).__name__}")
        for crd in crds:
            if not isinstance(crd, dict):
                raise ContractError(
                    f"{type(self).__name__} expects CRD documents as mappings, "
                    f"got {type(crd).__name__}")

    def _entry(self, config: WebhookConfig, crd_info, version: str) -> dict:
        meta = config.webhook
        return {
            "name": self.entry_name(crd_info.singular, crd_info.group),
            "admissionReviewVersions": list(ADMISSION_REVIEW_VERSIONS),
            "clientConfig": {
                "service": {
                    "name": names.service_name(meta),
                    "namespace": meta.namespace,
                    "path": names.admission_path(
                        self.action, crd_info.group, version, crd_info.singular),
                },
            },
            "rules": [{
                "apiGroups": [crd_info.group],
                "apiVersions": [version],
                "resources": [crd_info.plural],
                "operations": list(RULE_OPERATIONS),
            }],
            "failurePolicy": FAILURE_POLICY,
            "sideEffects": SIDE_EFFECTS,
        }

    def entries(self, config: WebhookConfig, crds: list[dict]) -> list[dict]:
        """Webhook entries for every served version of every complete CRD."""
        self._check_crds(crds)
        result = []
        for crd in crds:
            crd_info = inspect_crd(crd)
            if not crd_info.contributes:
                continue
            for version in crd_info.versions:
                result.append(self._entry(config, crd_info, version))
        return result

    def build(self, config, crds):
        meta = config.webhook
        return {
            "apiVersion": ADMISSION_API_VERSION,
            "kind": self.kind,
            "metadata": {
                "name": self.name(config),
                "namespace": meta.namespace,
                "annotations": names.certificate_annotation(meta),
            },
            "webhooks": self.entries(config, crds),
        }


class MutatingWebhookBuilder(_WebhookConfigurationBuilder):
    """Build the MutatingWebhookConfiguration (/mutate-… paths)."""
    kind = MUTATING_KIND
    action = "mutate"

    def name(self, config: WebhookConfig) -> str:
        return names.mutating_configuration_name(config.webhook)

    def entry_name(self, crd_singular, crd_group):
        return names.mutating_webhook_name(crd_singular, crd_group)


class ValidatingWebhookBuilder(_WebhookConfigurationBuilder):
    """Build the ValidatingWebhookConfiguration (/validate-… paths)."""
    kind = VALIDATING_KIND
    action = "validate"

    def name(self, config: WebhookConfig) -> str:
        return names.validating_configuration_name(config.webhook)

    def entry_name(self, crd_singular, crd_group):
        return names.validating_webhook_name(crd_singular, crd_group)
