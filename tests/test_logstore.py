"""
Tests for the report directory store.

Covers:
- Path resolution (synthesized names, user names, traversal attempts)
- Directory creation and the fatal failure path
- Retention (oldest-first deletion, tie-breaking, deletion failures)
- Atomic writes
"""

import itertools
import os
import tempfile
import unittest
from datetime import datetime, timedelta
from pathlib import Path
from unittest import mock

from reporter.logstore import LogStore


def _touch(path: Path, mtime: float) -> Path:
    path.write_text("report\n")
    os.utime(path, (mtime, mtime))
    return path


class LogStoreTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.dir = self.root / "logs"
        self.dir.mkdir()

    def tearDown(self):
        self._tmp.cleanup()

    def make_store(self, **kwargs):
        kwargs.setdefault("prefix", "system_report_")
        kwargs.setdefault("extension", ".log")
        kwargs.setdefault("max_logs", 50)
        return LogStore(self.dir, **kwargs)


class TestResolvePath(LogStoreTestCase):
    def test_synthesized_name_uses_timestamp(self):
        store = self.make_store(clock=lambda: datetime(2024, 1, 2, 3, 4, 5))
        self.assertEqual(
            store.resolve_path(),
            self.dir / "system_report_20240102_030405.log",
        )

    def test_same_second_gets_counter_suffix(self):
        store = self.make_store(clock=lambda: datetime(2024, 1, 1))
        first = store.write(store.resolve_path(), "one")
        second = store.write(store.resolve_path(), "two")
        third = store.resolve_path()

        self.assertEqual(first.name, "system_report_20240101_000000.log")
        self.assertEqual(second.name, "system_report_20240101_000000_1.log")
        self.assertEqual(third.name, "system_report_20240101_000000_2.log")
        self.assertEqual(first.read_text(), "one")
        self.assertEqual(store.count(), 2)

    def test_user_name_is_not_suffixed(self):
        store = self.make_store()
        (self.dir / "mine.log").write_text("old")
        self.assertEqual(store.resolve_path("mine"), self.dir / "mine.log")

    def test_extension_appended_once(self):
        store = self.make_store()
        self.assertEqual(store.resolve_path("report"), self.dir / "report.log")
        self.assertEqual(store.resolve_path("report.log"), self.dir / "report.log")

    def test_traversal_keeps_only_base_name(self):
        store = self.make_store()
        path = store.resolve_path("../../etc/passwd")
        self.assertEqual(path, self.dir / "passwd.log")
        self.assertEqual(path.parent, self.dir)

    def test_absolute_path_keeps_only_base_name(self):
        store = self.make_store()
        self.assertEqual(store.resolve_path("/tmp/elsewhere/evil"), self.dir / "evil.log")

    def test_windows_separators_are_stripped(self):
        store = self.make_store()
        self.assertEqual(store.resolve_path("C:\\Temp\\mine.log"), self.dir / "mine.log")

    def test_unusable_name_falls_back_to_timestamp(self):
        store = self.make_store(clock=lambda: datetime(2024, 6, 1, 12, 0, 0))
        for name in ("..", ".", "/", "dir/"):
            with self.subTest(name=name):
                path = store.resolve_path(name)
                self.assertEqual(path.parent, self.dir)
                if name == "dir/":
                    self.assertEqual(path.name, "dir.log")
                else:
                    self.assertEqual(path.name, "system_report_20240601_120000.log")


class TestEnsureDirectory(LogStoreTestCase):
    def test_creates_missing_directory(self):
        store = LogStore(self.root / "a" / "b")
        store.ensure_directory()
        self.assertTrue((self.root / "a" / "b").is_dir())

    def test_existing_directory_is_fine(self):
        self.make_store().ensure_directory()
        self.assertTrue(self.dir.is_dir())

    def test_uncreatable_directory_exits(self):
        blocker = self.root / "not-a-dir"
        blocker.write_text("")
        store = LogStore(blocker / "logs")
        with self.assertLogs("reporter.logstore", level="ERROR"):
            with self.assertRaises(SystemExit) as ctx:
                store.ensure_directory()
        self.assertEqual(ctx.exception.code, 1)


class TestRetention(LogStoreTestCase):
    def test_below_cap_removes_nothing(self):
        store = self.make_store()
        _touch(self.dir / "system_report_1.log", 100)
        _touch(self.dir / "system_report_2.log", 200)
        self.assertEqual(store.enforce_retention(3), [])
        self.assertEqual(store.count(), 2)

    def test_removes_oldest_first(self):
        store = self.make_store()
        files = [
            _touch(self.dir / f"system_report_{name}.log", mtime)
            # names deliberately out of mtime order
            for name, mtime in (("e", 100), ("a", 500), ("c", 200), ("b", 400), ("d", 300))
        ]
        removed = store.enforce_retention(3)

        # 5 - 3 + 1 = 3 oldest by mtime: e(100), c(200), d(300)
        self.assertEqual(removed, [files[0], files[2], files[4]])
        remaining = sorted(p.name for p in self.dir.iterdir())
        self.assertEqual(remaining, ["system_report_a.log", "system_report_b.log"])

    def test_ties_break_on_path(self):
        store = self.make_store()
        for name in ("c", "a", "b"):
            _touch(self.dir / f"system_report_{name}.log", 1000)
        removed = store.enforce_retention(2)
        self.assertEqual([p.name for p in removed],
                         ["system_report_a.log", "system_report_b.log"])

    def test_non_matching_files_are_ignored(self):
        store = self.make_store()
        keep = [
            _touch(self.dir / "custom.log", 1),
            _touch(self.dir / "notes.txt", 2),
            _touch(self.dir / "system_report_x.txt", 3),
        ]
        _touch(self.dir / "system_report_1.log", 10)
        _touch(self.dir / "system_report_2.log", 20)

        store.enforce_retention(1)

        self.assertEqual(store.count(), 0)
        for path in keep:
            self.assertTrue(path.exists(), path)

    def test_invalid_cap_is_rejected(self):
        with self.assertRaises(ValueError):
            self.make_store().enforce_retention(0)

    def test_default_cap_comes_from_store(self):
        store = self.make_store(max_logs=2)
        for i in range(4):
            _touch(self.dir / f"system_report_{i}.log", 100 + i)
        store.enforce_retention()
        self.assertEqual(store.count(), 1)

    def test_deletion_failure_is_logged_and_counted(self):
        store = self.make_store()
        stuck = _touch(self.dir / "system_report_1.log", 100)
        _touch(self.dir / "system_report_2.log", 200)
        _touch(self.dir / "system_report_3.log", 300)

        real_unlink = Path.unlink

        def flaky_unlink(path, *args, **kwargs):
            if path == stuck:
                raise PermissionError("read-only")
            return real_unlink(path, *args, **kwargs)

        with mock.patch.object(Path, "unlink", autospec=True, side_effect=flaky_unlink):
            with self.assertLogs("reporter.logstore", level="WARNING") as logs:
                removed = store.enforce_retention(2)

        self.assertEqual([p.name for p in removed], ["system_report_2.log"])
        self.assertTrue(any("system_report_1.log" in line for line in logs.output))
        self.assertEqual(store.count(), 2)

    def test_count_is_never_cached(self):
        store = self.make_store()
        self.assertEqual(store.count(), 0)
        _touch(self.dir / "system_report_1.log", 1)
        self.assertEqual(store.count(), 1)

    def test_count_of_missing_directory_is_zero(self):
        self.assertEqual(LogStore(self.root / "missing").count(), 0)

    def test_bounded_count_with_frozen_clock(self):
        store = self.make_store(max_logs=3, clock=lambda: datetime(2024, 1, 1))
        counts = []
        for i in range(5):
            store.enforce_retention()
            path = store.write(store.resolve_path(), f"run {i}\n")
            os.utime(path, (1000 + i, 1000 + i))
            counts.append(store.count())
        self.assertEqual(counts, [1, 2, 3, 3, 3])

    def test_bounded_count_over_many_runs(self):
        for max_count in (1, 2, 3, 5):
            for runs in (1, 2, 3, 6, 8):
                with self.subTest(max_count=max_count, runs=runs):
                    directory = self.root / f"run_{max_count}_{runs}"
                    ticks = itertools.count()
                    start = datetime(2024, 1, 1)
                    store = LogStore(
                        directory, prefix="system_report_", extension=".log",
                        max_logs=max_count,
                        clock=lambda: start + timedelta(seconds=next(ticks)),
                    )
                    for i in range(runs):
                        store.ensure_directory()
                        store.enforce_retention()
                        path = store.write(store.resolve_path(), f"run {i}\n")
                        os.utime(path, (1000 + i, 1000 + i))
                        self.assertEqual(store.count(), min(i + 1, max_count))


class TestWrite(LogStoreTestCase):
    def test_write_replaces_atomically(self):
        store = self.make_store()
        path = self.dir / "system_report_x.log"
        path.write_text("old")
        store.write(path, "new body\n")
        self.assertEqual(path.read_text(), "new body\n")
        self.assertEqual(list(self.dir.glob("*.partial")), [])

    def test_failed_write_leaves_no_partial_file(self):
        store = self.make_store()
        path = self.dir / "system_report_x.log"
        with mock.patch("reporter.logstore.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(OSError):
                store.write(path, "body")
        self.assertFalse(path.exists())
        self.assertEqual(list(self.dir.iterdir()), [])


if __name__ == "__main__":
    unittest.main()
