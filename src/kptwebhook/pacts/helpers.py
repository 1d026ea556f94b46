"""Helpers for reading resource documents."""

from kptwebhook.core.constants import INDEX_ANNOTATIONS, PATH_ANNOTATIONS


def dig(obj, *path, default=None):
    """Walk nested mappings along `path`; return `default` on any miss."""
    for key in path:
        if not isinstance(obj, dict):
            return default
        obj = obj.get(key)
        if obj is None:
            return default
    return obj


def kind_of(manifest: dict) -> str:
    return manifest.get("kind") or ""


def name_of(manifest: dict) -> str:
    return dig(manifest, "metadata", "name", default="")


def namespace_of(manifest: dict) -> str:
    return dig(manifest, "metadata", "namespace", default="")


def full_name(manifest: dict) -> str:
    """Return 'Kind/name' string for use in result messages."""
    return f"{kind_of(manifest) or '?'}/{name_of(manifest) or '?'}"


def resource_ref(manifest: dict | None) -> dict | None:
    """Build a kpt resourceRef from a document's identity fields."""
    if not isinstance(manifest, dict) or not manifest:
        return None
    ref = {
        "apiVersion": manifest.get("apiVersion", ""),
        "kind": kind_of(manifest),
        "name": name_of(manifest),
    }
    namespace = namespace_of(manifest)
    if namespace:
        ref["namespace"] = namespace
    return ref


def file_location(manifest: dict | None) -> dict | None:
    """Return {path, index} from the kpt path/index annotations, if present."""
    annotations = dig(manifest, "metadata", "annotations", default={})
    if not isinstance(annotations, dict):
        return None
    path = next((annotations[a] for a in PATH_ANNOTATIONS if annotations.get(a)), "")
    if not path:
        return None
    raw_index = next((annotations[a] for a in INDEX_ANNOTATIONS if a in annotations), 0)
    try:
        index = int(raw_index)
    except (TypeError, ValueError):
        index = 0
    return {"path": path, "index": index}
