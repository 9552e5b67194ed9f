"""CLI tests — swift and the catalog are mocked, manifests live in tmp_path."""

from __future__ import annotations

import subprocess
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from spmkit.cli import inquire_targets, main
from spmkit.engines.manifest_editor import DependencyReference, locate_targets
from spmkit.exceptions import CatalogError

_RUN = "spmkit.engines.toolchain.runner.subprocess.run"
_RESOLVE = "spmkit.cli.CatalogClient.resolve"


def _target_text(text: str, name: str) -> str:
    target = next(t for t in locate_targets(text) if t.name == name)
    return text[target.span.start : target.span.end]


def _fake_swift(lockfile, failing: str | None = None):
    """subprocess.run stand-in; ``resolve`` writes a lockfile pinning x/y."""
    calls: list[list[str]] = []

    def run(cmd, **kwargs):
        calls.append(cmd)
        if failing and cmd[1:] == failing.split():
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="error: boom\n")
        if cmd[1:] == ["package", "resolve"]:
            (kwargs["cwd"] / "Package.resolved").write_text(
                lockfile([("https://x/y.git", "y")])
            )
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    run.calls = calls
    return run


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("spmkit.cli.setup_logging") as mock_setup:
        yield mock_setup


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path, empty_deps_manifest):
    (tmp_path / "Package.swift").write_text(empty_deps_manifest)
    return tmp_path


def _install_args(project, *extra):
    return [
        "install",
        "y",
        "--url",
        "https://x/y.git",
        "--version",
        "1.0.0",
        "--project-dir",
        str(project),
        *extra,
    ]


class TestInstall:
    def test_explicit_target(self, runner, project, v2_lockfile):
        fake = _fake_swift(v2_lockfile)
        with patch(_RUN, side_effect=fake):
            result = runner.invoke(main, _install_args(project, "-t", "App"))

        assert result.exit_code == 0, result.output
        assert "📦  1 packages installed" in result.output
        assert "Installing Dependency..." in result.output
        manifest = (project / "Package.swift").read_text()
        assert '.package(url: "https://x/y.git", .exact("1.0.0"))' in manifest
        assert _target_text(manifest, "App") == '.target(name: "App", dependencies: ["y"])'
        assert _target_text(manifest, "AppTests") == '.testTarget(name: "AppTests", dependencies: [])'
        assert [c[1:] for c in fake.calls] == [
            ["package", "update"],
            ["package", "resolve"],
            ["build"],
        ]

    def test_no_build(self, runner, project, v2_lockfile):
        fake = _fake_swift(v2_lockfile)
        with patch(_RUN, side_effect=fake):
            result = runner.invoke(main, _install_args(project, "-t", "App", "--no-build"))

        assert result.exit_code == 0, result.output
        assert ["build"] not in [c[1:] for c in fake.calls]
        assert "Building project skipped" in result.output

    def test_swift_executable_option(self, runner, project, v2_lockfile):
        fake = _fake_swift(v2_lockfile)
        with patch(_RUN, side_effect=fake):
            result = runner.invoke(
                main, _install_args(project, "-t", "App", "--swift", "/opt/swift/bin/swift")
            )

        assert result.exit_code == 0, result.output
        assert {c[0] for c in fake.calls} == {"/opt/swift/bin/swift"}

    def test_interactive_selection(self, runner, project, v2_lockfile):
        with patch(_RUN, side_effect=_fake_swift(v2_lockfile)):
            result = runner.invoke(main, _install_args(project), input="y\nn\n")

        assert result.exit_code == 0, result.output
        assert "Would you like to add the package to the target 'App'?" in result.output
        manifest = (project / "Package.swift").read_text()
        assert _target_text(manifest, "App") == '.target(name: "App", dependencies: ["y"])'
        assert _target_text(manifest, "AppTests") == '.testTarget(name: "AppTests", dependencies: [])'

    def test_interactive_help_then_quit(self, runner, project, v2_lockfile):
        with patch(_RUN, side_effect=_fake_swift(v2_lockfile)):
            result = runner.invoke(main, _install_args(project), input="?\ny\nq\n")

        assert result.exit_code == 0, result.output
        assert "?: Output this message." in result.output
        manifest = (project / "Package.swift").read_text()
        assert _target_text(manifest, "App") == '.target(name: "App", dependencies: ["y"])'
        assert _target_text(manifest, "AppTests") == '.testTarget(name: "AppTests", dependencies: [])'

    def test_unknown_target_option(self, runner, project, v2_lockfile, empty_deps_manifest):
        fake = _fake_swift(v2_lockfile)
        with patch(_RUN, side_effect=fake):
            result = runner.invoke(main, _install_args(project, "-t", "Nope"))

        assert result.exit_code == 1
        assert "non-existent target" in result.output
        assert fake.calls == []
        assert (project / "Package.swift").read_text() == empty_deps_manifest

    def test_missing_manifest(self, runner, tmp_path):
        result = runner.invoke(main, _install_args(tmp_path, "-t", "App"))
        assert result.exit_code == 1
        assert "Bad path to package manifest" in result.output

    def test_toolchain_failure(self, runner, project, v2_lockfile):
        with patch(_RUN, side_effect=_fake_swift(v2_lockfile, failing="package update")):
            result = runner.invoke(main, _install_args(project, "-t", "App"))

        assert result.exit_code == 1
        assert "swift package update" in result.output
        assert "packages installed" not in result.output
        manifest = (project / "Package.swift").read_text()
        assert _target_text(manifest, "App") == '.target(name: "App", dependencies: [])'

    def test_verbose_prints_phase_summary(self, runner, project, v2_lockfile):
        with patch(_RUN, side_effect=_fake_swift(v2_lockfile)):
            result = runner.invoke(
                main, ["-v", *_install_args(project, "-t", "App", "--no-build")]
            )

        assert result.exit_code == 0, result.output
        assert "Install summary (total:" in result.output
        assert "[+] Reading Package Targets" in result.output
        assert " - App" in result.output
        assert "[+] Adding dependency to targets" in result.output
        assert "[-] Building project - disabled" in result.output

    def test_summary_hidden_without_verbose(self, runner, project, v2_lockfile):
        with patch(_RUN, side_effect=_fake_swift(v2_lockfile)):
            result = runner.invoke(main, _install_args(project, "-t", "App"))

        assert result.exit_code == 0, result.output
        assert "Install summary" not in result.output

    def test_verbose_sets_debug_logging(self, runner, tmp_path, _no_logging_setup):
        runner.invoke(main, ["-v", *_install_args(tmp_path)])
        _no_logging_setup.assert_called_once_with("DEBUG")


class TestCatalogLookup:
    def test_name_resolved_through_catalog(self, runner, project, v2_lockfile):
        found = DependencyReference(url="https://x/y.git", version="2.0.0")
        with (
            patch(_RESOLVE, new_callable=AsyncMock, return_value=found) as mock_resolve,
            patch(_RUN, side_effect=_fake_swift(v2_lockfile)),
        ):
            result = runner.invoke(
                main, ["install", "x/y", "-t", "App", "--project-dir", str(project)]
            )

        assert result.exit_code == 0, result.output
        mock_resolve.assert_awaited_once_with("x/y")
        assert '.exact("2.0.0")' in (project / "Package.swift").read_text()

    def test_version_option_overrides_catalog(self, runner, project, v2_lockfile):
        found = DependencyReference(url="https://x/y.git", version="2.0.0")
        with (
            patch(_RESOLVE, new_callable=AsyncMock, return_value=found),
            patch(_RUN, side_effect=_fake_swift(v2_lockfile)),
        ):
            result = runner.invoke(
                main,
                ["install", "y", "--version", "1.5.0", "-t", "App", "--project-dir", str(project)],
            )

        assert result.exit_code == 0, result.output
        manifest = (project / "Package.swift").read_text()
        assert '.package(url: "https://x/y.git", .exact("1.5.0"))' in manifest

    def test_url_and_version_skip_catalog(self, runner, project, v2_lockfile):
        with (
            patch(_RESOLVE, new_callable=AsyncMock) as mock_resolve,
            patch(_RUN, side_effect=_fake_swift(v2_lockfile)),
        ):
            result = runner.invoke(main, _install_args(project, "-t", "App"))

        assert result.exit_code == 0, result.output
        mock_resolve.assert_not_awaited()

    def test_catalog_error(self, runner, project, empty_deps_manifest):
        with patch(_RESOLVE, new_callable=AsyncMock, side_effect=CatalogError("no package found")):
            result = runner.invoke(main, ["install", "nothing", "--project-dir", str(project)])

        assert result.exit_code == 1
        assert "Error: no package found" in result.output
        assert (project / "Package.swift").read_text() == empty_deps_manifest


class TestInquireTargets:
    def _asker(self, *answers):
        replies = iter(answers)
        questions: list[str] = []

        def ask(question):
            questions.append(question)
            return next(replies)

        ask.questions = questions
        return ask

    def test_single_target_is_not_asked(self):
        ask = self._asker()
        assert inquire_targets(["App"], ask) == ["App"]
        assert ask.questions == []

    def test_no_targets(self):
        assert inquire_targets([], self._asker()) == []

    def test_yes_and_no(self):
        ask = self._asker("y", "n", "Y")
        assert inquire_targets(["A", "B", "C"], ask) == ["A", "C"]
        assert len(ask.questions) == 3

    def test_quit_keeps_earlier_answers(self):
        ask = self._asker("y", "q")
        assert inquire_targets(["A", "B", "C"], ask) == ["A"]

    def test_unknown_answer_asks_again(self, capsys):
        ask = self._asker("maybe", "?", "y", "y")
        assert inquire_targets(["A", "B"], ask) == ["A", "B"]
        assert ask.questions[0] == ask.questions[2]
        assert capsys.readouterr().out.count("q: Do not add the package") == 2
