"""Unit tests for CRD introspection."""

from kptwebhook.core.crd import crd_versions, inspect_crd

from conftest import make_crd


class TestInspectCrd:
    def test_complete_crd(self):
        info = inspect_crd(make_crd(versions=("v1", "v1beta1")))
        assert info.singular == "widget"
        assert info.plural == "widgets"
        assert info.group == "example.com"
        assert info.versions == ["v1", "v1beta1"]
        assert info.contributes

    def test_missing_fields_are_empty(self):
        info = inspect_crd({"kind": "CustomResourceDefinition"})
        assert info.singular == ""
        assert info.plural == ""
        assert info.group == ""
        assert info.versions == []
        assert not info.contributes

    def test_missing_names_do_not_contribute(self):
        crd = make_crd()
        del crd["spec"]["names"]
        assert not inspect_crd(crd).contributes


class TestCrdVersions:
    def test_unserved_versions_skipped(self):
        crd = make_crd(versions=("v1", "v1alpha1"))
        crd["spec"]["versions"][1]["served"] = False
        assert crd_versions(crd) == ["v1"]

    def test_legacy_single_version(self):
        crd = make_crd()
        del crd["spec"]["versions"]
        crd["spec"]["version"] = "v1beta1"
        assert crd_versions(crd) == ["v1beta1"]

    def test_versions_without_name_skipped(self):
        crd = make_crd()
        crd["spec"]["versions"].append({"served": True})
        assert crd_versions(crd) == ["v1"]
