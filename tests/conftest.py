"""Shared fixtures: a simulated Debian host, settings rooted in tmp_path, a run log."""

import os
from pathlib import Path

import pytest
import requests
from loguru import logger

from jenkins_updater.config import UpdaterSettings
from jenkins_updater.core.dataclasses import CommandResult
from jenkins_updater.progress.run_log import RunLog


class FakeHost:
    """
    Stands in for CommandRunner. Answers dpkg-query, apt-cache, apt-get,
    dpkg and systemctl from a small in-memory model of the host.
    """

    def __init__(self, installed="2.1", candidate="2.1", running=True):
        self.installed = installed
        self.candidate = candidate
        self.running = running
        self.upgrade_to = None
        self.restart_on_install = True
        self.stop_works = True
        self.failures = {}
        self.calls = []

    def fail(self, command, returncode=100):
        self.failures[command] = returncode

    def commands(self):
        return [" ".join(call[:2]) for call in self.calls]

    def _ok(self, args, stdout=""):
        return CommandResult(args=args, returncode=0, stdout=stdout)

    def run(self, args, env=None):
        args = list(args)
        self.calls.append(args)
        key = " ".join(args[:2])
        if key in self.failures:
            return CommandResult(args=args, returncode=self.failures[key], stderr="E: simulated failure")

        if args[0] == "dpkg-query":
            if self.installed is None:
                return CommandResult(args=args, returncode=1, stderr="no packages found")
            return self._ok(args, self.installed)

        if key == "apt-cache policy":
            return self._ok(
                args,
                f"jenkins:\n"
                f"  Installed: {self.installed or '(none)'}\n"
                f"  Candidate: {self.candidate or '(none)'}\n"
                f"  Version table:\n"
                f" *** {self.installed} 100\n",
            )

        if key == "apt-get -q":
            return self._ok(args, "Reading package lists...")

        if key == "apt-get install":
            self.installed = self.upgrade_to or self.candidate
            if self.restart_on_install:
                self.running = True
            return self._ok(args)

        if key == "dpkg --install":
            self.installed = Path(args[-1]).name.split("_")[1]
            if self.restart_on_install:
                self.running = True
            return self._ok(args)

        if key == "systemctl stop":
            if self.stop_works:
                self.running = False
            return self._ok(args)

        if key == "systemctl start":
            self.running = True
            return self._ok(args)

        if key == "systemctl show":
            if self.running:
                body = f"LoadState=loaded\nActiveState=active\nSubState=running\nMainPID={os.getpid()}\n"
            else:
                body = "LoadState=loaded\nActiveState=inactive\nSubState=dead\nMainPID=0\n"
            return self._ok(args, body)

        raise AssertionError(f"unexpected command: {args}")


class FakeResponse:
    def __init__(self, status_code=200, body=b"!<arch>\ndebian-binary"):
        self.status_code = status_code
        self.body = body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error: Not Found")

    def iter_content(self, chunk_size=1):
        yield self.body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.requested = []

    def get(self, url, stream=False, timeout=None):
        self.requested.append(url)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks left pointing at captured streams of a finished test."""
    yield
    logger.remove()


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def archive_cache(tmp_path):
    cache = tmp_path / "archives"
    cache.mkdir()
    (cache / "jenkins_2.1_all.deb").write_bytes(b"cached archive")
    (cache / "git_2.39_amd64.deb").write_bytes(b"unrelated")
    return cache


@pytest.fixture
def settings(tmp_path, archive_cache):
    return UpdaterSettings(
        work_dir=tmp_path,
        archive_cache_dir=archive_cache,
        settle_delay=0,
        echo=False,
    )


@pytest.fixture
def run_log(tmp_path):
    log = RunLog(tmp_path / "run.log", echo=False)
    log.open()
    yield log
    log.close()


@pytest.fixture
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("JENKINS_UPDATER_"):
            monkeypatch.delenv(key)
    return monkeypatch
