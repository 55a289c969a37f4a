"""CLI tests for ``metricslog version`` and ``metricslog report``."""

from __future__ import annotations

import textwrap

from typer.testing import CliRunner

from metricslog.cli.main import app
from metricslog.monitoring.metrics.proto import parse_record

runner = CliRunner()

STATE = textwrap.dedent(
    """
    counters:
      stability.launch_count: 4
      stability.crash_count: 2
      user_experience_metrics.client_id_timestamp: "1690000000"
    plugin_stats:
      - {name: Flash, launches: 1, instances: 1, crashes: 0}
    plugins:
      - {name: Flash, path: /usr/lib/libflash.so, version: "11.2"}
    disabled_plugins: [Flash]
    field_trials:
      Prerender: Enabled
    profile_metrics:
      profile-abc: {bookmarks: 3}
    host:
      cpu_architecture: x86_64
      memory_mb: 4096
      os_name: Linux
      os_version: "6.1"
    """
)


def _write_state(tmp_path, content: str = STATE):
    path = tmp_path / "state.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def _write_config(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("build:\n  version: '9.9.9'\n  official: true\n", encoding="utf-8")
    return path


def test_version_command(tmp_path) -> None:
    result = runner.invoke(app, ["--config", str(_write_config(tmp_path)), "version"])

    assert result.exit_code == 0, result.stdout
    assert "9.9.9" in result.stdout


def test_build_writes_both_encodings(tmp_path) -> None:
    out_dir = tmp_path / "out"
    result = runner.invoke(
        app,
        [
            "--config",
            str(_write_config(tmp_path)),
            "report",
            "build",
            str(_write_state(tmp_path)),
            "--client-id",
            "abc",
            "--session-id",
            "5",
            "--output-dir",
            str(out_dir),
        ],
    )

    assert result.exit_code == 0, result.stdout
    legacy = (out_dir / "log.xml").read_bytes()
    assert b'clientid="abc"' in legacy
    assert b'launchcount="4"' in legacy
    assert b"userprofile" in legacy

    record = parse_record((out_dir / "log.pb").read_bytes())
    assert record.session_id == 5
    assert record.system_profile.app_version == "9.9.9"
    assert record.system_profile.stability.crash_count == 2
    assert record.system_profile.plugin[0].is_disabled is True
    assert len(record.system_profile.field_trial) == 1


def test_incremental_build_skips_environment(tmp_path) -> None:
    out_dir = tmp_path / "out"
    result = runner.invoke(
        app,
        ["report", "build", str(_write_state(tmp_path)), "--output-dir", str(out_dir), "--incremental"],
    )

    assert result.exit_code == 0, result.stdout
    record = parse_record((out_dir / "log.pb").read_bytes())
    assert record.system_profile.stability.launch_count == 4
    assert len(record.system_profile.plugin) == 0
    assert not record.system_profile.HasField("hardware")


def test_invalid_state_file_is_rejected(tmp_path) -> None:
    state = _write_state(tmp_path, "unknown_section: 1\n")

    result = runner.invoke(app, ["report", "build", str(state), "--output-dir", str(tmp_path / "out")])

    assert result.exit_code != 0
    assert not (tmp_path / "out").exists()


def test_bad_config_exits_with_error(tmp_path) -> None:
    result = runner.invoke(app, ["--config", str(tmp_path / "absent.yaml"), "version"])

    assert result.exit_code == 1


def test_inspect_summarises_structured_report(tmp_path) -> None:
    out_dir = tmp_path / "out"
    build = runner.invoke(
        app,
        ["report", "build", str(_write_state(tmp_path)), "--client-id", "xyz", "--output-dir", str(out_dir)],
    )
    assert build.exit_code == 0, build.stdout

    result = runner.invoke(app, ["report", "inspect", str(out_dir / "log.pb"), "--raw"])

    assert result.exit_code == 0, result.stdout
    assert 'client_id: "xyz"' in result.stdout
