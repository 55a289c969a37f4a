"""Tests for the reporting version string."""

from metricslog.config.settings import BuildSettings
from metricslog.monitoring.metrics.version import VersionProvider


def test_official_build_reports_plain_version(process_state):
    provider = VersionProvider(BuildSettings(version="24.0.1", official=True), process_state)

    assert provider.version_string() == "24.0.1"


def test_unofficial_build_is_marked_devel(process_state):
    provider = VersionProvider(BuildSettings(version="24.0.1", official=False), process_state)

    assert provider.version_string() == "24.0.1-devel"


def test_version_extension_is_appended_before_devel(process_state):
    process_state.set_version_extension("-beta")
    provider = VersionProvider(BuildSettings(version="24.0.1", official=False), process_state)

    assert provider.version_string() == "24.0.1-beta-devel"


def test_missing_build_info_reports_empty_version(process_state, caplog):
    with caplog.at_level("ERROR"):
        assert VersionProvider(None, process_state).version_string() == ""

    assert "Unable to retrieve version info" in caplog.text


def test_uses_shared_process_state_by_default(process_state):
    process_state.set_version_extension("-x64")

    assert VersionProvider(BuildSettings(version="1.0", official=True)).version_string() == "1.0-x64"
