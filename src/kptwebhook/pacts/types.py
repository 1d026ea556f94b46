"""Public data types — the function config model, results and builder contract."""

from dataclasses import dataclass, field
from typing import NamedTuple

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"


@dataclass
class WebhookMeta:
    """Identity of the webhook: every companion name derives from it."""
    name: str = ""
    namespace: str = ""


@dataclass
class ServiceSpec:
    """Service ports. Zero means unset; builders fall back to defaults."""
    port: int = 0
    target_port: int = 0


@dataclass
class CertificateSpec:
    """Issuer the serving certificate is requested from."""
    issuer_ref: str = ""


@dataclass
class ContainerSpec:
    """Container in the workload pod template that serves the webhook."""
    name: str = ""


class ResultKey(NamedTuple):
    """Identifies one field of one resource touched during a pass."""
    kind: str
    name: str
    namespace: str = ""
    file_path: str = ""
    file_index: int = 0
    field_path: str = ""


@dataclass
class WebhookConfig:
    """Decoded function config for a single invocation."""
    operation: str = ""
    webhook: WebhookMeta = field(default_factory=WebhookMeta)
    service: ServiceSpec = field(default_factory=ServiceSpec)
    certificate: CertificateSpec = field(default_factory=CertificateSpec)
    container: ContainerSpec = field(default_factory=ContainerSpec)
    # Bookkeeping of applied changes, keyed by the resource field touched
    changes: dict = field(default_factory=dict)

    def record(self, key: ResultKey, operation: str) -> None:
        """Append an applied operation to the change log."""
        self.changes.setdefault(key, []).append(operation)


@dataclass
class Result:
    """One entry of the ResourceList results (kpt results schema)."""
    message: str
    severity: str = SEVERITY_ERROR
    resource_ref: dict | None = None
    file: dict | None = None
    field: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == SEVERITY_ERROR

    def to_dict(self) -> dict:
        """Serialize to the kpt results layout, omitting unset parts."""
        out: dict = {"message": self.message, "severity": self.severity}
        if self.resource_ref:
            out["resourceRef"] = dict(self.resource_ref)
        if self.field:
            out["field"] = {"path": self.field}
        if self.file:
            out["file"] = dict(self.file)
        return out


class CrdInfo(NamedTuple):
    """Names, group and versions extracted from a CustomResourceDefinition."""
    singular: str
    plural: str
    group: str
    versions: list

    @property
    def contributes(self) -> bool:
        """Whether this CRD yields any webhook entry."""
        return bool(self.singular and self.plural and self.group and self.versions)


class CompanionBuilder:
    """Base class for companion resource builders.

    `build` receives the config and the CRD documents found in the resource
    list. Builders that do not derive anything from CRDs ignore them.
    """
    kind: str = ""

    def name(self, config: WebhookConfig) -> str:
        """Name of the resource this builder produces for `config`."""
        raise NotImplementedError

    def build(self, config: WebhookConfig, crds: list[dict]) -> dict:
        """Return a fresh resource document. Override in subclasses."""
        raise NotImplementedError


@dataclass
class CompanionSlot:
    """Where (if anywhere) a companion resource sits in the current list."""
    builder: CompanionBuilder
    name: str
    found: bool = False
    index: int = -1

    @property
    def kind(self) -> str:
        return self.builder.kind
