# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Smoke tests for the command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from engine_fakes import FakeProvisioner, FakeRunner, engine_report
from w3c_validate_css.cli import app, build_validator
from w3c_validate_css.config import Settings
from w3c_validate_css.errors import HostUnavailableError
from w3c_validate_css.invocation import InvocationRunner, ProcessOutput
from w3c_validate_css.models import Profile
from w3c_validate_css.provisioning import EngineProvisioner
from w3c_validate_css.validator import Validator


@pytest.fixture
def site(write_css, tmp_path: Path) -> dict[str, Path]:
    good = write_css("site/good.css")
    bad = write_css("site/bad.css", "a { colr: red; }")
    return {"root": tmp_path / "site", "good": good, "bad": bad}


@pytest.fixture
def fake_engine(monkeypatch, site: dict[str, Path], engine_jar: Path) -> dict[str, object]:
    captured: dict[str, object] = {}
    runner = FakeRunner(
        {
            site["good"]: ProcessOutput(stdout=engine_report(site["good"])),
            site["bad"]: ProcessOutput(
                stdout=engine_report(site["bad"], errors=[{"line": 1, "message": "Property “colr” doesn't exist :"}]),
            ),
        }
    )

    def fake_build_validator(settings: Settings, reporter) -> Validator:
        captured["settings"] = settings
        return Validator(
            provisioner=FakeProvisioner(engine_jar),
            runner_factory=lambda engine: runner,
            host_check=lambda: None,
            observer=reporter,
        )

    monkeypatch.setattr("w3c_validate_css.cli.build_validator", fake_build_validator)
    captured["runner"] = runner
    return captured


def _invoke(*args: str, config_root: Path):
    runner = CliRunner()
    return runner.invoke(app, [*args, "--config-root", str(config_root), "--no-color", "--no-emoji"])


def test_cli_requires_target(tmp_path: Path) -> None:
    result = _invoke(config_root=tmp_path)
    assert result.exit_code != 0


def test_cli_human_report_and_exit_status(fake_engine, site: dict[str, Path], tmp_path: Path) -> None:
    result = _invoke("--target", str(site["root"]), config_root=tmp_path)

    assert result.exit_code == 1
    assert "w3c validating 2 CSS files in" in result.output
    assert "✖ bad.css" in result.output
    assert "✔ good.css" in result.output
    assert "bad.css:1 - Property “colr” doesn't exist" in result.output


def test_cli_json_output(fake_engine, site: dict[str, Path], tmp_path: Path) -> None:
    result = _invoke("-t", str(site["root"]), "--json", config_root=tmp_path)

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["passed"] == 1
    assert payload["failed"] == 1
    assert [entry["file"] for entry in payload["results"]] == [str(site["bad"]), str(site["good"])]


def test_cli_tolerate_downgrades_error(fake_engine, site: dict[str, Path], tmp_path: Path) -> None:
    result = _invoke("-t", str(site["root"]), "--tolerate", "COLR", "-w", "0", "--json", config_root=tmp_path)

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["failed"] == 0
    assert all(entry["warnings"] == [] for entry in payload["results"])


def test_cli_passes_options_into_settings(fake_engine, site: dict[str, Path], tmp_path: Path) -> None:
    result = _invoke(
        "-t",
        str(site["good"]),
        "-p",
        "SVG",
        "-d",
        "-e",
        "--timeout",
        "12.5",
        "--cache-dir",
        str(tmp_path / "cache"),
        config_root=tmp_path,
    )

    assert result.exit_code == 0
    settings = fake_engine["settings"]
    assert isinstance(settings, Settings)
    assert settings.validation.profile is Profile.SVG
    assert settings.validation.include_deprecations is True
    assert settings.validation.errors_only is True
    assert settings.engine.invocation_timeout == 12.5
    assert settings.engine.cache_dir == tmp_path / "cache"


def test_cli_reports_fatal_errors(monkeypatch, site: dict[str, Path], tmp_path: Path, engine_jar: Path) -> None:
    def no_java() -> None:
        raise HostUnavailableError("java not found")

    monkeypatch.setattr(
        "w3c_validate_css.cli.build_validator",
        lambda settings, reporter: Validator(
            provisioner=FakeProvisioner(engine_jar),
            runner_factory=lambda engine: FakeRunner({}),
            host_check=no_java,
            observer=reporter,
        ),
    )

    result = _invoke("-t", str(site["root"]), config_root=tmp_path)

    assert result.exit_code == 1
    assert "error java not found" in result.output

    default_result = CliRunner().invoke(app, ["-t", str(site["root"]), "--config-root", str(tmp_path)])

    assert default_result.exit_code == 1
    assert "error java not found" in default_result.output
    assert "\N{CROSS MARK}" not in default_result.output


def test_cli_reports_missing_target(fake_engine, tmp_path: Path) -> None:
    result = _invoke("-t", str(tmp_path / "missing"), config_root=tmp_path)

    assert result.exit_code == 1
    assert "path not found" in result.output


def test_build_validator_wires_settings(tmp_path: Path) -> None:
    settings = Settings().with_overrides({"cache-dir": tmp_path, "timeout": 5, "java": "/opt/java/bin/java"})
    validator = build_validator(settings, None)

    provisioner = validator._provisioner
    assert isinstance(provisioner, EngineProvisioner)
    assert provisioner.cache_path == tmp_path / "css-validator.jar"
    runner = validator._runner_factory(tmp_path / "engine.jar")
    assert isinstance(runner, InvocationRunner)
    assert runner.command(tmp_path / "a.css", settings.validation)[0] == "/opt/java/bin/java"
