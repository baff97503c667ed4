"""CLI tests: argument forms, exit codes, run record and end-to-end runs."""

import re

import pytest

from jenkins_updater import run
from jenkins_updater.host.downloader import ArchiveDownloader
from jenkins_updater.utils.run_lock import RunLock

from conftest import FakeHost, FakeResponse, FakeSession

LINE_RE = re.compile(r"^\d{8} \d{6} (INFO|ACTION|SUCCESS|ERROR) ")


@pytest.fixture
def cli(tmp_path, archive_cache, clean_env):
    """Runs main() against a FakeHost with the log next to a program in tmp_path."""
    host = FakeHost()
    session = FakeSession()
    clean_env.setenv("JENKINS_UPDATER_SETTLE_DELAY", "0")
    clean_env.setenv("JENKINS_UPDATER_ARCHIVE_CACHE_DIR", str(archive_cache))
    clean_env.setattr(run, "CommandRunner", lambda timeout=None: host)
    clean_env.setattr(
        run,
        "ArchiveDownloader",
        lambda base_url, timeout=None: ArchiveDownloader(base_url, timeout=timeout, session=session),
    )
    program = tmp_path / "jenkins_auto_update"

    class Cli:
        log_file = tmp_path / "jenkins_auto_update.log"

        def __init__(self):
            self.host = host
            self.session = session

        def __call__(self, *argv):
            return run.main(list(argv), prog=str(program))

        def lines(self):
            return self.log_file.read_text(encoding="utf-8").splitlines()

    return Cli()


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["update", "extra"],
        ["rollback"],
        ["upgrade"],
        ["rollback", "1.652", "extra"],
        ["--unknown-flag", "update"],
        ["--help"],
        ["-h", "update"],
    ],
)
def test_bad_arguments_print_usage_and_exit_1(cli, capsys, argv):
    assert cli(*argv) == 1

    out = capsys.readouterr().out
    assert "Usage: jenkins_auto_update {update|rollback} [version]" in out
    assert cli.host.calls == []
    assert cli.lines()[-1].endswith(" ERROR Parameter(s) is/are wrong. Exiting...")


def test_every_invocation_appends(cli):
    cli()
    first = cli.lines()
    cli("update", "extra")
    second = cli.lines()

    assert second[: len(first)] == first
    assert len(second) > len(first)
    assert all(LINE_RE.match(line) for line in second)
    assert sum(line.endswith("File created.") for line in second) == 1


def test_update_twice_end_to_end(cli):
    cli.host.candidate = "2.2"
    assert cli("update") == 0
    first_run = cli.lines()
    assert any(line.endswith(" SUCCESS   - Jenkins has been updated to 2.2") for line in first_run)
    assert first_run[-1].endswith(" INFO DONE!")

    assert cli("update") == 0
    second_run = cli.lines()[len(first_run):]
    assert second_run[1].endswith(" INFO New run:")
    assert any(line.endswith(" INFO Nothing to do.") for line in second_run)
    assert second_run[-1].endswith(" INFO DONE!")


def test_echo_to_screen_and_quiet(cli, capsys):
    cli("update")
    assert " INFO New run:" in capsys.readouterr().out

    cli("--quiet", "update")
    assert " INFO New run:" not in capsys.readouterr().out


def test_rollback_end_to_end(cli):
    cli.host.installed = "2.2"
    assert cli("rollback", "1.652") == 0
    assert cli.session.requested[-1].endswith("/jenkins_1.652_all.deb")
    assert cli.host.installed == "1.652"


def test_rollback_download_failure_exits_1(cli):
    cli.session.response = FakeResponse(status_code=404)
    assert cli("rollback", "1.652") == 1
    assert "dpkg --install" not in cli.host.commands()
    assert any(
        " ERROR   - Unable to retrieve package from http://pkg.jenkins-ci.org/debian/binary/" in line
        for line in cli.lines()
    )


def test_rollback_with_unsafe_version_exits_1(cli):
    assert cli("rollback", "1.652/../../x") == 1
    assert cli.session.requested == []
    assert cli.host.calls == []


def test_service_not_running_exits_1(cli):
    cli.host.running = False
    assert cli("update") == 1
    assert cli.lines()[-1].split(" ", 3)[2] == "ERROR"


def test_concurrent_run_is_refused(cli, tmp_path):
    with RunLock(tmp_path / "jenkins_auto_update.lock"):
        assert cli("update") == 1
    assert cli.host.calls == []
    assert "Another run is in progress" in "\n".join(cli.lines())


def test_invalid_config_exits_1(cli, tmp_path, capsys):
    config = tmp_path / "bad.yml"
    config.write_text("download_timeout: -5\n", encoding="utf-8")
    assert cli("--config", str(config), "update") == 1
    assert "Configuration error" in capsys.readouterr().err
    assert cli.host.calls == []

    lines = cli.lines()
    assert lines[-2].endswith(" INFO New run:")
    assert lines[-1].endswith(" ERROR   - Invalid updater settings. Exiting...")


def test_parse_operation():
    assert run.parse_operation(["update"]) == (run.OperationMode.UPDATE, None)
    assert run.parse_operation(["rollback", "1.652"]) == (run.OperationMode.ROLLBACK, "1.652")
    with pytest.raises(run.BadArguments):
        run.parse_operation(["rollback", "1.652", "x"])
