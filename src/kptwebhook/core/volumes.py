"""Certificate volume injection into the workload pod template."""

import copy

from kptwebhook.pacts.helpers import dig, full_name
from kptwebhook.pacts.types import WebhookConfig
from kptwebhook.core import names
from kptwebhook.core.constants import CERT_VOLUME_DEFAULT_MODE
from kptwebhook.core.errors import InjectionError


def pod_spec(manifest: dict) -> dict | None:
    """Return spec.template.spec of a workload, or None if it has none."""
    spec = dig(manifest, "spec", "template", "spec")
    return spec if isinstance(spec, dict) else None


def has_container(manifest: dict, container_name: str) -> bool:
    """Whether the workload's pod template runs a container of that name."""
    spec = pod_spec(manifest)
    if spec is None:
        return False
    containers = spec.get("containers") or []
    if not isinstance(containers, list):
        return False
    return any(isinstance(c, dict) and c.get("name") == container_name for c in containers)


def build_volume(config: WebhookConfig) -> dict:
    meta = config.webhook
    return {
        "name": names.base_name(meta),
        "secret": {
            "secretName": names.certificate_name(meta),
            "defaultMode": CERT_VOLUME_DEFAULT_MODE,
        },
    }


def build_volume_mount(config: WebhookConfig) -> dict:
    return {
        "name": names.base_name(config.webhook),
        "mountPath": names.cert_mount_path(),
        "readOnly": True,
    }


def _list_at(parent: dict, key: str, where: str) -> list:
    """Return parent[key] as a list, creating it when absent."""
    value = parent.get(key)
    if value is None:
        value = parent[key] = []
    if not isinstance(value, list):
        raise InjectionError(f"{where}.{key} is not a list ({type(value).__name__})")
    return value


def _upsert_named(entries: list, entry: dict) -> dict | None:
    """Replace the entry with the same name in place, else append it.

    Returns the replaced entry when it differed from `entry`.
    """
    for i, existing in enumerate(entries):
        if isinstance(existing, dict) and existing.get("name") == entry["name"]:
            entries[i] = entry
            return existing if existing != entry else None
    entries.append(entry)
    return None


def inject_cert_volume(manifest: dict, config: WebhookConfig,
                       warnings: list[str] | None = None) -> dict:
    """Return a copy of the workload with the serving-cert volume wired in.

    Adds one secret volume to the pod template and one read-only mount to
    the configured container. Existing entries with the same name are
    replaced so re-running does not duplicate them; a replaced entry that
    differs from the generated one is reported in `warnings`. Everything
    else is left as it was. The input document is never modified.
    """
    workload = copy.deepcopy(manifest)
    spec = pod_spec(workload)
    if spec is None:
        raise InjectionError(f"{full_name(manifest)} has no pod template spec",
                             resource=manifest)
    container_path = f"spec.template.spec.containers[name={config.container.name}]"
    try:
        container = None
        for c in _list_at(spec, "containers", "spec.template.spec"):
            if isinstance(c, dict) and c.get("name") == config.container.name:
                container = c
                break
        if container is None:
            raise InjectionError(
                f"container '{config.container.name}' not found in {full_name(manifest)}")
        replaced_volume = _upsert_named(
            _list_at(spec, "volumes", "spec.template.spec"), build_volume(config))
        replaced_mount = _upsert_named(
            _list_at(container, "volumeMounts", container_path), build_volume_mount(config))
    except InjectionError as exc:
        exc.resource = manifest
        raise
    if warnings is not None:
        volume_name = names.base_name(config.webhook)
        if replaced_volume is not None:
            warnings.append(f"volume '{volume_name}' in {full_name(manifest)} "
                            f"replaced by the serving certificate volume")
        if replaced_mount is not None:
            warnings.append(f"volumeMount '{volume_name}' of {container_path} in "
                            f"{full_name(manifest)} replaced by the serving certificate mount")
    return workload
