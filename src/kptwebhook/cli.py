"""CLI entry point — run the webhook transformer as a kpt function."""

import argparse
import sys

from kptwebhook.pacts.types import SEVERITY_ERROR, SEVERITY_WARNING, Result
from kptwebhook.core.errors import ResourceListError
from kptwebhook.core.resourcelist import (
    dump_resource_list, load_fn_config, load_resource_list, parse_resource_list,
)
from kptwebhook.core.transform import run

_MARKERS = {SEVERITY_ERROR: "✗", SEVERITY_WARNING: "⚠"}


def emit_results(results: list[Result]) -> None:
    """Print all results to stderr, errors and warnings marked."""
    for r in results:
        marker = _MARKERS.get(r.severity, "·")
        print(f"{marker} {r.message}", file=sys.stderr)


def _read_input(path: str | None) -> dict:
    if path:
        return load_resource_list(path)
    return parse_resource_list(sys.stdin.read())


def _write_output(text: str, path: str | None) -> None:
    if not path:
        sys.stdout.write(text)
        return
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as exc:
        raise ResourceListError(f"cannot write {path}: {exc}") from exc
    print(f"Wrote {path}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="kptwebhook",
        description="Add or remove the Service, Certificate and webhook "
                    "configurations that expose an admission webhook",
    )
    parser.add_argument(
        "--input",
        help="Read the ResourceList from this file (default: stdin)",
    )
    parser.add_argument(
        "--output",
        help="Write the ResourceList to this file (default: stdout)",
    )
    parser.add_argument(
        "--fn-config",
        help="Function config file (ConfigMap or Webhook), replaces the one in the ResourceList",
    )
    parser.add_argument(
        "--fail-on-error", action="store_true",
        help="Exit with status 1 when any error result was produced",
    )
    args = parser.parse_args(argv)

    try:
        resource_list = _read_input(args.input)
        if args.fn_config:
            resource_list["functionConfig"] = load_fn_config(args.fn_config)
        print(f"Read {len(resource_list['items'])} resource(s)", file=sys.stderr)

        results = run(resource_list)
        emit_results(results)

        _write_output(dump_resource_list(resource_list, results), args.output)
    except ResourceListError as exc:
        print(f"✗ {exc}", file=sys.stderr)
        return 1

    if args.fail_on_error and any(r.is_error for r in results):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
