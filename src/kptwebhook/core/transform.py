"""Main transform orchestration — scan, add/delete companions, run()."""

from kptwebhook.pacts.helpers import (
    file_location, full_name, kind_of, name_of, namespace_of, resource_ref,
)
from kptwebhook.pacts.types import (
    SEVERITY_INFO, SEVERITY_WARNING, CompanionBuilder, CompanionSlot, Result, ResultKey,
    WebhookConfig,
)
from kptwebhook.core.certificate import CertificateBuilder
from kptwebhook.core.config import load_config
from kptwebhook.core.constants import (
    CRD_KIND, OPERATION_ADD, OPERATION_DELETE, WORKLOAD_KINDS,
)
from kptwebhook.core.errors import BuildError, InjectionError
from kptwebhook.core.service import ServiceBuilder
from kptwebhook.core.volumes import has_container, inject_cert_volume
from kptwebhook.core.webhooks import MutatingWebhookBuilder, ValidatingWebhookBuilder

# Builder instances used by transform(), in the order companions are applied
_BUILDERS: list[CompanionBuilder] = []
_BUILDERS.extend([
    ServiceBuilder(), CertificateBuilder(),
    MutatingWebhookBuilder(), ValidatingWebhookBuilder(),
])

# All kinds a pass may create or remove
COMPANION_KINDS = tuple(b.kind for b in _BUILDERS)


def _new_slots(config: WebhookConfig) -> dict[str, CompanionSlot]:
    """One empty slot per companion kind, fresh for every pass."""
    return {b.kind: CompanionSlot(builder=b, name=b.name(config)) for b in _BUILDERS}


def _record(config: WebhookConfig, results: list[Result], manifest: dict,
            operation: str, field_path: str = "") -> None:
    """Log an applied change in the config and as an info result."""
    loc = file_location(manifest) or {}
    key = ResultKey(kind=kind_of(manifest), name=name_of(manifest),
                    namespace=namespace_of(manifest),
                    file_path=loc.get("path", ""), file_index=loc.get("index", 0),
                    field_path=field_path)
    config.record(key, operation)
    target = f"{full_name(manifest)} {field_path}" if field_path else full_name(manifest)
    results.append(Result(message=f"{operation} {target}", severity=SEVERITY_INFO,
                          resource_ref=resource_ref(manifest), file=file_location(manifest),
                          field=field_path or None))


def _scan(items: list, config: WebhookConfig, slots: dict[str, CompanionSlot],
          results: list[Result]) -> tuple[list[dict], int | None]:
    """Locate CRDs, the target workload and existing companions in one pass.

    Returns (crds, workload_index). The first workload running the container
    and the first document matching a companion kind+name win; later matches
    are reported as warnings and otherwise left alone.
    """
    crds: list[dict] = []
    workload_index = None
    for i, o in enumerate(items):
        if not isinstance(o, dict):
            continue
        kind = kind_of(o)
        if kind == CRD_KIND:
            crds.append(o)
        elif kind in WORKLOAD_KINDS:
            if not has_container(o, config.container.name):
                continue
            if workload_index is None:
                workload_index = i
            else:
                results.append(Result(
                    message=(f"container '{config.container.name}' also found in "
                             f"{full_name(o)}; using {full_name(items[workload_index])}"),
                    severity=SEVERITY_WARNING, resource_ref=resource_ref(o),
                    file=file_location(o)))
        elif kind in slots and name_of(o) == slots[kind].name:
            slot = slots[kind]
            if not slot.found:
                slot.found = True
                slot.index = i
            else:
                results.append(Result(
                    message=f"duplicate {full_name(o)} ignored",
                    severity=SEVERITY_WARNING, resource_ref=resource_ref(o),
                    file=file_location(o)))
    return crds, workload_index


def _build_failure(exc: BuildError, slot: CompanionSlot, items: list,
                   config: WebhookConfig) -> Result:
    """Error result attributed to the companion that could not be built."""
    if slot.found:
        target = items[slot.index]
        return Result(message=str(exc), resource_ref=resource_ref(target),
                      file=file_location(target))
    ref = {"apiVersion": "", "kind": slot.kind, "name": slot.name}
    if config.webhook.namespace:
        ref["namespace"] = config.webhook.namespace
    return Result(message=str(exc), resource_ref=ref)


def _apply_add(items: list, config: WebhookConfig, slots: dict[str, CompanionSlot],
               crds: list[dict], workload_index: int, results: list[Result]) -> None:
    """Upsert every companion, then wire the cert volume into the workload."""
    for slot in slots.values():
        try:
            obj = slot.builder.build(config, crds)
        except BuildError as exc:
            results.append(_build_failure(exc, slot, items, config))
            continue
        if slot.found:
            items[slot.index] = obj
            _record(config, results, obj, "replaced")
        else:
            items.append(obj)
            _record(config, results, obj, "added")

    workload = items[workload_index]
    warnings: list[str] = []
    try:
        items[workload_index] = inject_cert_volume(workload, config, warnings)
    except InjectionError as exc:
        results.append(Result(message=str(exc), resource_ref=resource_ref(workload),
                              file=file_location(workload)))
        return
    for w in warnings:
        results.append(Result(message=w, severity=SEVERITY_WARNING,
                              resource_ref=resource_ref(workload),
                              file=file_location(workload)))
    _record(config, results, items[workload_index], "mounted",
            field_path="spec.template.spec.volumes")


def _apply_delete(items: list, config: WebhookConfig, slots: dict[str, CompanionSlot],
                  results: list[Result]) -> None:
    """Remove located companions, highest position first."""
    # Deleting from the end keeps the lower recorded positions valid
    positions = sorted((s.index for s in slots.values() if s.found), reverse=True)
    for idx in positions:
        removed = items.pop(idx)
        _record(config, results, removed, "removed")


def transform(items: list, config: WebhookConfig) -> list[Result]:
    """Apply `config.operation` to the resource list in place.

    Returns the results of the pass. When no workload runs the configured
    container the list is left untouched and a single error is returned.
    """
    results: list[Result] = []
    slots = _new_slots(config)
    crds, workload_index = _scan(items, config, slots, results)

    if workload_index is None:
        return [Result(message=f"container not found: no workload runs "
                               f"container '{config.container.name}'")]

    if config.operation == OPERATION_ADD:
        _apply_add(items, config, slots, crds, workload_index, results)
    elif config.operation == OPERATION_DELETE:
        _apply_delete(items, config, slots, results)
    return results


def run(resource_list: dict) -> list[Result]:
    """Process a whole ResourceList: load its function config, then transform.

    Items are modified in place; all results (config errors included) are
    returned in the order they were produced.
    """
    config, results = load_config(resource_list.get("functionConfig"))
    items = resource_list.get("items")
    if items is None:
        items = resource_list["items"] = []
    results.extend(transform(items, config))
    return results
