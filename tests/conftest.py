# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import pytest

from regkeeper.core import config, logger


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep config files, log files and cached singletons out of tests"""
    for name in [
        "REGKEEPER_HOME",
        "REGKEEPER_LOG_DIR",
        "REGKEEPER_PROVIDER",
        "REGKEEPER_STATE_FILE",
        "REGKEEPER_FAIL_FAST",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("REGKEEPER_NO_FILE_LOGS", "true")
    monkeypatch.setenv("REGKEEPER_LOG_LEVEL", "WARNING")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "_config", None)
    monkeypatch.setattr(logger, "_configured", {})
    yield


@pytest.fixture
def snapshot():
    return {
        r"HKLM\Software\Vendor": {"Setting": "hello", "Stale": "old", "": "default"},
        r"32:HKLM\Software\Vendor": {"Wow": 1},
        r"HKLM\Software\Other": {},
    }
