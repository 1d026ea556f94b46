"""CustomResourceDefinition introspection for webhook rule generation."""

from kptwebhook.pacts.helpers import dig
from kptwebhook.pacts.types import CrdInfo


def _str(value) -> str:
    return value if isinstance(value, str) else ""


def crd_versions(crd: dict) -> list[str]:
    """Names of the served versions, in declaration order.

    Versions explicitly marked `served: false` are left out. A legacy
    single `spec.version` is used when there is no `versions` list.
    """
    versions = dig(crd, "spec", "versions", default=[])
    if not isinstance(versions, list) or not versions:
        legacy = _str(dig(crd, "spec", "version", default=""))
        return [legacy] if legacy else []
    names = []
    for v in versions:
        if not isinstance(v, dict) or v.get("served") is False:
            continue
        name = _str(v.get("name"))
        if name:
            names.append(name)
    return names


def inspect_crd(crd: dict) -> CrdInfo:
    """Extract singular/plural names, group and served versions.

    Missing fields come back empty; callers treat an incomplete CRD as
    contributing no webhook rules rather than as an error.
    """
    return CrdInfo(
        singular=_str(dig(crd, "spec", "names", "singular", default="")),
        plural=_str(dig(crd, "spec", "names", "plural", default="")),
        group=_str(dig(crd, "spec", "group", default="")),
        versions=crd_versions(crd),
    )
