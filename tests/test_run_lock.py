"""Mutual exclusion between runs."""

import os

import pytest

from jenkins_updater.core.exceptions import ConcurrentRunError
from jenkins_updater.utils.run_lock import RunLock


def test_lock_records_pid_and_releases(tmp_path):
    path = tmp_path / "updater.lock"
    with RunLock(path) as lock:
        assert lock.held
        assert path.read_text().strip() == str(os.getpid())
    assert not lock.held


def test_second_holder_is_refused(tmp_path):
    path = tmp_path / "updater.lock"
    with RunLock(path):
        with pytest.raises(ConcurrentRunError):
            RunLock(path).acquire()


def test_lock_can_be_taken_again_after_release(tmp_path):
    path = tmp_path / "updater.lock"
    RunLock(path).acquire().release()
    with RunLock(path) as lock:
        assert lock.held
