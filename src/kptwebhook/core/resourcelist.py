"""ResourceList transport — read the kpt envelope, write it back with results."""

import yaml

from kptwebhook.pacts.types import Result
from kptwebhook.core.constants import RESOURCE_LIST_API_VERSION, RESOURCE_LIST_KIND
from kptwebhook.core.errors import ResourceListError


def parse_resource_list(text: str) -> dict:
    """Parse a ResourceList document; an empty input is an empty list."""
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ResourceListError(f"cannot parse ResourceList: {exc}") from exc
    if doc is None:
        doc = {"apiVersion": RESOURCE_LIST_API_VERSION, "kind": RESOURCE_LIST_KIND}
    if not isinstance(doc, dict):
        raise ResourceListError(f"ResourceList must be a mapping, got {type(doc).__name__}")
    kind = doc.get("kind", RESOURCE_LIST_KIND)
    if kind != RESOURCE_LIST_KIND:
        raise ResourceListError(f"expected kind {RESOURCE_LIST_KIND}, got {kind}")
    items = doc.setdefault("items", [])
    if items is None:
        doc["items"] = []
    elif not isinstance(items, list):
        raise ResourceListError("ResourceList items must be a list")
    return doc


def load_resource_list(path: str) -> dict:
    """Read and parse a ResourceList file."""
    try:
        with open(path, encoding="utf-8") as f:
            return parse_resource_list(f.read())
    except OSError as exc:
        raise ResourceListError(f"cannot read {path}: {exc}") from exc


def load_fn_config(path: str) -> dict:
    """Read a standalone function config document (ConfigMap or Webhook)."""
    try:
        with open(path, encoding="utf-8") as f:
            doc = yaml.safe_load(f)
    except OSError as exc:
        raise ResourceListError(f"cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ResourceListError(f"cannot parse {path}: {exc}") from exc
    return doc or {}


def dump_resource_list(resource_list: dict, results: list[Result]) -> str:
    """Serialize the ResourceList with `results` appended to any existing ones."""
    out = {
        "apiVersion": resource_list.get("apiVersion", RESOURCE_LIST_API_VERSION),
        "kind": RESOURCE_LIST_KIND,
        "items": resource_list.get("items") or [],
    }
    if resource_list.get("functionConfig"):
        out["functionConfig"] = resource_list["functionConfig"]
    all_results = list(resource_list.get("results") or [])
    all_results.extend(r.to_dict() for r in results)
    if all_results:
        out["results"] = all_results
    try:
        return yaml.safe_dump(out, default_flow_style=False, sort_keys=False)
    except yaml.YAMLError as exc:
        raise ResourceListError(f"cannot serialize ResourceList: {exc}") from exc
