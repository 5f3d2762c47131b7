# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import pytest

from regkeeper.core.exceptions import FlagFormatError, ManifestError, PathSyntaxError
from regkeeper.core.parsers import ManifestParser
from regkeeper.core.resources import Ensure, RegistryKey, RegistryValue, ValueType

MANIFEST = r"""
resources:
  registry_key:
    'HKLM\Software\Vendor':
      purge_values: true
    'hklm\Software\Vendor\App': ~
  registry_value:
    'HKLM\Software\Vendor\Setting':
      type: dword
      data: 1
    default:
      path: 'HKLM\Software\Vendor\'
      data: hello
      require: 'registry_key[HKLM\Software\Vendor\App]'
"""


def test_parse_file(tmp_path):
    """Test a manifest becomes resources in declaration order"""
    path = tmp_path / "site.yaml"
    path.write_text(MANIFEST)

    resources = ManifestParser.parse_file(path)

    assert [type(r) for r in resources] == [
        RegistryKey,
        RegistryKey,
        RegistryValue,
        RegistryValue,
    ]
    vendor, app, setting, default = resources
    assert vendor.purge_values is True
    assert app.title == r"HKLM\Software\Vendor\App"
    assert app.purge_values is False
    assert setting.value_type is ValueType.DWORD
    assert setting.data == 1
    assert default.path.is_default
    assert default.require == (r"registry_key[HKLM\Software\Vendor\App]",)


def test_parse_ensure_absent():
    resources = ManifestParser.parse(
        {"resources": {"registry_value": {r"HKLM\A\B": {"ensure": "absent"}}}}
    )
    assert resources[0].ensure is Ensure.ABSENT


def test_empty_manifest():
    assert ManifestParser.parse({}) == []
    assert ManifestParser.parse({"resources": {"registry_key": None}}) == []


def test_invalid_path_reraised():
    """Test path errors surface unchanged"""
    with pytest.raises(PathSyntaxError) as exc_info:
        ManifestParser.parse({"resources": {"registry_key": {r"HKCU\Software": {}}}})

    assert exc_info.value.fragment == "HKCU"


def test_invalid_flag_reraised():
    """Test the offending purge_values literal reaches the user"""
    data = {"resources": {"registry_key": {r"HKLM\A": {"purge_values": "yes"}}}}

    with pytest.raises(FlagFormatError, match="not yes"):
        ManifestParser.parse(data)


@pytest.mark.parametrize(
    "data,match",
    [
        ({"resources": ["x"]}, "must be a mapping"),
        ({"resources": {"file": {}}}, "Unknown resource type"),
        ({"resources": {"registry_key": ["HKLM"]}}, "must be a mapping"),
        ({"resources": {"registry_key": {"HKLM": "x"}}}, "must be a mapping"),
        ({"resources": {"registry_key": {"HKLM": {"data": 1}}}}, "Invalid parameter"),
        ({"resources": {"registry_value": {r"HKLM\A": {"type": "x"}}}}, "Invalid declaration"),
    ],
)
def test_invalid_manifests(data, match):
    with pytest.raises(ManifestError, match=match):
        ManifestParser.parse(data)


def test_load_errors(tmp_path):
    """Test unreadable files and non-mapping documents"""
    with pytest.raises(ManifestError, match="Failed to load"):
        ManifestParser.load_yaml(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("- a\n- b\n")
    with pytest.raises(ManifestError) as exc_info:
        ManifestParser.parse_file(bad)
    assert exc_info.value.file_path == str(bad)


def test_parse_file_sets_file_path(tmp_path):
    path = tmp_path / "site.yaml"
    path.write_text("resources:\n  file: {}\n")

    with pytest.raises(ManifestError) as exc_info:
        ManifestParser.parse_file(path)
    assert exc_info.value.file_path == str(path)


@pytest.mark.parametrize("literal", ["yes", "on", "Yes", "ON", "no", "off"])
def test_yaml_11_booleans_rejected(tmp_path, literal):
    """Test unquoted yes/on/no/off reach flag validation as literals"""
    path = tmp_path / "site.yaml"
    path.write_text(
        f"resources:\n  registry_key:\n    'HKLM\\Software':\n      purge_values: {literal}\n"
    )

    with pytest.raises(FlagFormatError) as exc_info:
        ManifestParser.parse_file(path)
    assert exc_info.value.literal == literal


@pytest.mark.parametrize("literal,expected", [("true", True), ("TRUE", True), ("False", False)])
def test_true_false_any_case(tmp_path, literal, expected):
    path = tmp_path / "site.yaml"
    path.write_text(
        f"resources:\n  registry_key:\n    'HKLM\\Software':\n      purge_values: {literal}\n"
    )

    assert ManifestParser.parse_file(path)[0].purge_values is expected
