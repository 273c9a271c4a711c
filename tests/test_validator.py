# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the run aggregator."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from engine_fakes import FakeProvisioner, FakeRunner, engine_report
from w3c_validate_css.errors import HostUnavailableError, InputNotFoundError, ProvisioningError
from w3c_validate_css.invocation import ProcessOutput
from w3c_validate_css.models import FileResult, ValidationConfig
from w3c_validate_css.validator import Validator, validate

VENDOR_WARNING = {"line": 2, "message": "-webkit-transition is a vendor extension", "type": "vendor-extension"}


class RecordingObserver:
    def __init__(self) -> None:
        self.started: tuple[Path, list[Path]] | None = None
        self.done: list[FileResult] = []

    def start(self, target: Path, files: Sequence[Path]) -> None:
        self.started = (target, list(files))

    def file_done(self, result: FileResult) -> None:
        self.done.append(result)


def _validator(engine_jar: Path, runner: FakeRunner, **kwargs) -> Validator:
    return Validator(
        provisioner=FakeProvisioner(engine_jar),
        runner_factory=lambda engine: runner,
        host_check=lambda: None,
        **kwargs,
    )


def test_directory_with_passing_and_failing_file(write_css, tmp_path: Path, engine_jar: Path) -> None:
    good = write_css("site/good.css")
    bad = write_css("site/bad.css", "a { color: ; }")
    runner = FakeRunner(
        {
            good: ProcessOutput(stdout=engine_report(good)),
            bad: ProcessOutput(stdout=engine_report(bad, errors=[{"line": 1, "message": "Parse Error"}])),
        }
    )

    summary = _validator(engine_jar, runner).validate(tmp_path / "site", ValidationConfig())

    assert (summary.passed, summary.failed) == (1, 1)
    assert [result.file for result in summary.results] == [bad, good]
    assert [file for file, _ in runner.calls] == [bad, good]
    assert summary.results[0].errors[0].message == "Parse Error"
    assert summary.results[1].ok is True


@pytest.mark.parametrize(
    ("config", "ok", "warning_count"),
    [
        (ValidationConfig(warning_level=2), False, 1),
        (ValidationConfig(warning_level=0), True, 0),
        (ValidationConfig(warning_level=2, errors_only=True), True, 0),
    ],
)
def test_warning_policy(
    write_css,
    engine_jar: Path,
    config: ValidationConfig,
    ok: bool,
    warning_count: int,
) -> None:
    file = write_css("vendor.css")
    runner = FakeRunner({file: ProcessOutput(stdout=engine_report(file, warnings=[VENDOR_WARNING]))})

    result = _validator(engine_jar, runner).validate(file, config).results[0]

    assert result.ok is ok
    assert result.errors == ()
    assert len(result.warnings) == warning_count


def test_missing_json_becomes_failed_result(write_css, engine_jar: Path) -> None:
    broken = write_css("broken.css")
    fine = write_css("fine.css")
    runner = FakeRunner(
        {
            broken: ProcessOutput(stderr="Exception in thread main", returncode=1),
            fine: ProcessOutput(stdout=engine_report(fine)),
        }
    )

    summary = _validator(engine_jar, runner).validate(broken.parent, ValidationConfig())

    assert (summary.passed, summary.failed) == (1, 1)
    failed = summary.results[0]
    assert failed.file == broken
    assert failed.ok is False
    assert [diag.message for diag in failed.errors] == ["validator did not produce JSON output"]


def test_observer_sees_banner_and_each_result(write_css, tmp_path: Path, engine_jar: Path) -> None:
    first = write_css("a.css")
    second = write_css("b.css")
    runner = FakeRunner({path: ProcessOutput(stdout=engine_report(path)) for path in (first, second)})
    observer = RecordingObserver()

    summary = _validator(engine_jar, runner, observer=observer).validate(tmp_path, ValidationConfig())

    assert observer.started == (tmp_path, [first, second])
    assert observer.done == list(summary.results)


def test_provisioning_happens_once_per_run(write_css, tmp_path: Path, engine_jar: Path) -> None:
    files = [write_css(f"{name}.css") for name in "abc"]
    provisioner = FakeProvisioner(engine_jar)
    engines: list[Path] = []
    runner = FakeRunner({path: ProcessOutput(stdout=engine_report(path)) for path in files})

    def factory(engine: Path) -> FakeRunner:
        engines.append(engine)
        return runner

    Validator(provisioner=provisioner, runner_factory=factory, host_check=lambda: None).validate(
        tmp_path, ValidationConfig()
    )

    assert provisioner.calls == 1
    assert engines == [engine_jar]


def test_repeated_runs_are_identical(write_css, engine_jar: Path) -> None:
    file = write_css("a.css")
    report = engine_report(file, errors=[{"line": 3, "message": "b"}, {"line": 1, "message": "a"}])
    runner = FakeRunner({file: ProcessOutput(stdout=report)})
    validator = _validator(engine_jar, runner)

    assert validator.validate(file, ValidationConfig()) == validator.validate(file, ValidationConfig())


def test_host_check_runs_before_provisioning(write_css, engine_jar: Path) -> None:
    file = write_css("a.css")
    provisioner = FakeProvisioner(engine_jar)

    def no_java() -> None:
        raise HostUnavailableError("java not found")

    validator = Validator(provisioner=provisioner, runner_factory=lambda engine: FakeRunner({}), host_check=no_java)
    with pytest.raises(HostUnavailableError):
        validator.validate(file, ValidationConfig())
    assert provisioner.calls == 0


def test_provisioning_failure_aborts_before_any_file(write_css, engine_jar: Path) -> None:
    file = write_css("a.css")
    runner = FakeRunner({})

    class BrokenProvisioner:
        def resolve(self) -> Path:
            raise ProvisioningError("failed to obtain css-validator.jar")

    validator = Validator(
        provisioner=BrokenProvisioner(),
        runner_factory=lambda engine: runner,
        host_check=lambda: None,
    )
    with pytest.raises(ProvisioningError):
        validator.validate(file, ValidationConfig())
    assert runner.calls == []


def test_missing_target_is_fatal(tmp_path: Path, engine_jar: Path) -> None:
    with pytest.raises(InputNotFoundError):
        _validator(engine_jar, FakeRunner({})).validate(tmp_path / "nope", ValidationConfig())


def test_module_level_validate_uses_defaults(write_css, engine_jar: Path) -> None:
    file = write_css("a.css")
    runner = FakeRunner({file: ProcessOutput(stdout=engine_report(file, warnings=[VENDOR_WARNING]))})

    summary = validate(file, validator=_validator(engine_jar, runner))

    assert summary.failed == 1
    assert runner.calls[0][1] == ValidationConfig()
