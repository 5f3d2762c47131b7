# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import pytest

from regkeeper.core.base_provider import RegistryProvider
from regkeeper.core.exceptions import (
    DAGCycleError,
    DuplicateResourceError,
    ProviderError,
    UnknownResourceError,
)
from regkeeper.core.providers.memory import MemoryProvider
from regkeeper.core.resources import Ensure, RegistryKey, RegistryValue
from regkeeper.core.runtime import compile_catalog, compile_file


class DenyingProvider(MemoryProvider):
    """Memory provider that cannot read one key"""

    def __init__(self, snapshot, denied):
        super().__init__(snapshot)
        self.denied = denied

    def list_value_names(self, key):
        if key.canonical == self.denied:
            raise ProviderError("access denied", provider_name="denying", key=key.canonical)
        return super().list_value_names(key)


def test_compile_generates_removals(snapshot):
    """Test removals are inserted after their key"""
    key = RegistryKey(r"HKLM\Software\Vendor", purge_values=True)
    setting = RegistryValue(r"HKLM\Software\Vendor\setting", data="hello")

    plan = compile_catalog([key, setting], MemoryProvider(snapshot))

    assert plan.ok
    assert [r.title for r in plan.generated] == [
        r"HKLM\Software\Vendor\Stale",
        "HKLM\\Software\\Vendor\\",
    ]
    assert plan.levels == [
        [key.ref],
        [setting.ref] + [r.ref for r in plan.generated],
    ]
    assert plan.catalog.direct_dependents_of(key)[1:] == plan.generated


def test_declared_absent_value_not_duplicated(snapshot):
    """Test a value declared absent is not generated again"""
    key = RegistryKey(r"HKLM\Software\Vendor", purge_values=True)
    values = [
        RegistryValue(r"HKLM\Software\Vendor\Setting"),
        RegistryValue(r"HKLM\Software\Vendor\Stale", ensure="absent"),
        RegistryValue("HKLM\\Software\\Vendor\\"),
    ]

    plan = compile_catalog([key] + values, MemoryProvider(snapshot))

    assert plan.generated == []
    assert len(plan.catalog) == 4


def test_dependent_names_protect_values():
    """Test every value attached to the key contributes its name"""
    key = RegistryKey(r"HKLM\Software", purge_values=True)
    child_value = RegistryValue(r"HKLM\Software\Vendor\Setting")
    provider = MemoryProvider({r"HKLM\Software": {"Setting": 1, "Other": 2}})

    plan = compile_catalog([key, child_value], provider)

    assert [r.title for r in plan.generated] == [r"HKLM\Software\Other"]


def test_failure_isolated_per_key(snapshot):
    """Test one unreadable key does not stop purging of the others"""
    vendor = RegistryKey(r"HKLM\Software\Vendor", purge_values=True)
    wow = RegistryKey(r"32:HKLM\Software\Vendor", purge_values=True)
    provider = DenyingProvider(snapshot, denied=r"HKLM\Software\Vendor")

    plan = compile_catalog([vendor, wow], provider)

    assert not plan.ok
    assert list(plan.failures) == [vendor.ref]
    assert plan.failures[vendor.ref]["message"] == "access denied"
    assert [r.title for r in plan.generated] == [r"32:HKLM\Software\Vendor\Wow"]


def test_fail_fast(snapshot):
    vendor = RegistryKey(r"HKLM\Software\Vendor", purge_values=True)
    provider = DenyingProvider(snapshot, denied=r"HKLM\Software\Vendor")

    with pytest.raises(ProviderError, match="access denied"):
        compile_catalog([vendor], provider, fail_fast=True)


def test_explicit_require():
    """Test 'require' adds an ordering edge"""
    first = RegistryKey(r"HKCR\CLSID")
    second = RegistryKey(r"HKLM\Software", require=[r"registry_key[hkcr\clsid]"])

    plan = compile_catalog([second, first], MemoryProvider())

    assert plan.levels == [[first.ref], [second.ref]]


def test_unknown_require():
    key = RegistryKey(r"HKLM\Software", require=r"registry_key[HKLM\Missing]")

    with pytest.raises(UnknownResourceError):
        compile_catalog([key], MemoryProvider())


def test_require_cycle():
    a = RegistryKey(r"HKLM\A", require=r"registry_key[HKLM\B]")
    b = RegistryKey(r"HKLM\B", require=r"registry_key[HKLM\A]")

    with pytest.raises(DAGCycleError):
        compile_catalog([a, b], MemoryProvider())


def test_duplicate_declaration():
    with pytest.raises(DuplicateResourceError):
        compile_catalog(
            [RegistryKey(r"HKLM\Software"), RegistryKey(r"hklm\SOFTWARE")],
            MemoryProvider(),
        )


def test_plan_to_dict(snapshot):
    key = RegistryKey(r"HKLM\Software\Other", purge_values=True)
    plan = compile_catalog([key], MemoryProvider(snapshot))

    assert plan.to_dict() == {
        "resources": [
            {
                "type": "registry_key",
                "path": r"HKLM\Software\Other",
                "ensure": "present",
                "purge_values": True,
            }
        ],
        "levels": [[key.ref]],
        "purged": [],
        "failures": {},
    }


def test_compile_file(tmp_path):
    """Test compiling a manifest from disk"""
    manifest = tmp_path / "site.yaml"
    manifest.write_text(
        "resources:\n"
        "  registry_key:\n"
        "    'HKLM\\Software\\Vendor':\n"
        "      purge_values: true\n"
    )
    provider = MemoryProvider({r"HKLM\Software\Vendor": {"Stale": 1}})

    plan = compile_file(manifest, provider)

    assert [r.title for r in plan.generated] == [r"HKLM\Software\Vendor\Stale"]
    assert plan.generated[0].ensure is Ensure.ABSENT


def test_custom_provider_subclass():
    """Test any RegistryProvider can drive compilation"""

    class EmptyProvider(RegistryProvider):
        def list_value_names(self, key):
            return []

    plan = compile_catalog(
        [RegistryKey(r"HKLM\Software", purge_values=True)], EmptyProvider()
    )
    assert plan.ok and plan.generated == []
