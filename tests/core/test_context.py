"""Tests for Context and MockContext."""

import pytest

from portstat.core.context import Context
from tests.conftest import MockContext


class TestContext:
    """Tests for the real Context."""

    def test_read_file(self, tmp_path):
        path = tmp_path / "ip_local_port_range"
        path.write_text("32768\t60999\n")

        assert Context().read_file(str(path)) == "32768\t60999\n"

    def test_read_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Context().read_file(str(tmp_path / "missing"))

    def test_sleep(self, monkeypatch):
        slept = []
        monkeypatch.setattr("portstat.core.context.time.sleep", slept.append)

        Context().sleep(2.5)

        assert slept == [2.5]


class TestMockContext:
    """Tests for the test double."""

    def test_read_file(self):
        context = MockContext(file_contents={"/proc/net/tcp": "data"})

        assert context.read_file("/proc/net/tcp") == "data"
        assert context.files_read == ["/proc/net/tcp"]

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            MockContext().read_file("/proc/net/tcp6")

    def test_stored_exception_is_raised(self):
        context = MockContext(file_contents={"/proc/net/tcp": PermissionError("denied")})

        with pytest.raises(PermissionError):
            context.read_file("/proc/net/tcp")

    def test_sleep_limit_interrupts(self):
        context = MockContext(max_sleeps=1)

        context.sleep(3)
        with pytest.raises(KeyboardInterrupt):
            context.sleep(3)
        assert context.sleeps == [3]
