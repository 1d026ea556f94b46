"""Shared fixtures: function configs, workloads and CRDs."""

import pytest

from kptwebhook.core.config import config_from_dict


def make_deployment(name="controller", containers=("manager",), volumes=None):
    """Deployment whose pod template runs the given containers."""
    pod_spec = {
        "containers": [{"name": c, "image": f"example.com/{c}:latest"} for c in containers],
    }
    if volumes is not None:
        pod_spec["volumes"] = volumes
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": name, "namespace": "bar"},
        "spec": {
            "replicas": 1,
            "template": {
                "metadata": {"labels": {"app": name}},
                "spec": pod_spec,
            },
        },
    }


def make_crd(group="example.com", singular="widget", plural="widgets", versions=("v1",)):
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": f"{plural}.{group}"},
        "spec": {
            "group": group,
            "names": {"kind": singular.capitalize(), "singular": singular, "plural": plural},
            "scope": "Namespaced",
            "versions": [{"name": v, "served": True, "storage": i == 0}
                         for i, v in enumerate(versions)],
        },
    }


def webhook_fields(operation="add", issuer="selfsigned", container="manager"):
    return {
        "operation": operation,
        "webhook": {"name": "foo", "namespace": "bar"},
        "service": {"port": 443, "targetPort": 9443},
        "certificate": {"issuerRef": issuer},
        "container": {"name": container},
    }


@pytest.fixture
def add_config():
    return config_from_dict(webhook_fields("add"))


@pytest.fixture
def delete_config():
    return config_from_dict(webhook_fields("delete"))


@pytest.fixture
def deployment():
    return make_deployment()


@pytest.fixture
def crd():
    return make_crd(versions=("v1", "v1beta1"))
