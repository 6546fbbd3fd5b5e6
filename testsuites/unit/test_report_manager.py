import os
import re
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from uiauto_tools.report_tools import report_manager
from uiauto_tools.report_tools.report_manager import (
    TEMP_REPORT_NAME,
    ReportManager,
    file_creation_time,
    get_timestamped_report_name,
    is_report_file,
)

pytestmark = pytest.mark.reports


@pytest.fixture(autouse=True)
def _mtime_as_creation_time(monkeypatch):
    # Birth time is not settable, so ordering in these tests follows mtime
    monkeypatch.setattr(report_manager, "file_creation_time", lambda path: path.stat().st_mtime)


def _make_reports(report_dir: Path, count: int, base_time: float = 1_700_000_000):
    report_dir.mkdir(parents=True, exist_ok=True)
    names = []
    for index in range(count):
        name = f"ExtentReport_2024-01-01_00-00-{index:02d}.html"
        path = report_dir / name
        path.write_text("<html></html>", encoding="utf-8")
        os.utime(path, (base_time + index * 60, base_time + index * 60))
        names.append(name)
    return names


def test_cleanup_deletes_oldest_beyond_retention(tmp_path):
    names = _make_reports(tmp_path, 5)
    manager = ReportManager(tmp_path, retention_count=3)

    deleted = manager.cleanup_old_reports()

    assert deleted == names[:2]
    assert sorted(p.name for p in tmp_path.iterdir()) == names[2:]


def test_cleanup_within_retention_deletes_nothing(tmp_path):
    names = _make_reports(tmp_path, 3)
    manager = ReportManager(tmp_path, retention_count=3)

    assert manager.cleanup_old_reports() == []
    assert sorted(p.name for p in tmp_path.iterdir()) == names


def test_cleanup_creates_missing_directory(tmp_path):
    report_dir = tmp_path / "nested" / "reports"
    manager = ReportManager(report_dir, retention_count=2)

    assert manager.cleanup_old_reports() == []
    assert report_dir.is_dir()


def test_cleanup_ignores_non_report_files(tmp_path):
    _make_reports(tmp_path, 4)
    (tmp_path / "ExtentReport.html").write_text("temp", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("keep", encoding="utf-8")
    (tmp_path / "ExtentReport_old.htm").write_text("keep", encoding="utf-8")
    manager = ReportManager(tmp_path, retention_count=1)

    deleted = manager.cleanup_old_reports()

    assert len(deleted) == 3
    assert (tmp_path / "ExtentReport.html").exists()
    assert (tmp_path / "notes.txt").exists()
    assert (tmp_path / "ExtentReport_old.htm").exists()


def test_cleanup_continues_after_delete_failure(tmp_path, monkeypatch):
    names = _make_reports(tmp_path, 4)
    manager = ReportManager(tmp_path, retention_count=1)
    original_unlink = Path.unlink

    def flaky_unlink(self, *args, **kwargs):
        if self.name == names[0]:
            raise PermissionError("locked")
        return original_unlink(self, *args, **kwargs)

    monkeypatch.setattr(Path, "unlink", flaky_unlink)

    deleted = manager.cleanup_old_reports()

    assert deleted == names[1:3]
    assert (tmp_path / names[0]).exists()
    assert (tmp_path / names[3]).exists()


def test_retention_zero_deletes_everything(tmp_path):
    _make_reports(tmp_path, 2)
    manager = ReportManager(tmp_path, retention_count=0)

    assert len(manager.cleanup_old_reports()) == 2
    assert manager.get_report_count() == 0


def test_list_all_reports_newest_first(tmp_path):
    names = _make_reports(tmp_path, 3)
    manager = ReportManager(tmp_path)

    assert manager.list_all_reports() == list(reversed(names))


def test_count_and_list_for_absent_directory(tmp_path):
    manager = ReportManager(tmp_path / "missing")

    assert manager.get_report_count() == 0
    assert manager.list_all_reports() == []
    assert not (tmp_path / "missing").exists()


def test_timestamped_report_name_format():
    name = get_timestamped_report_name(datetime(2024, 3, 9, 14, 5, 7))
    assert name == "ExtentReport_2024-03-09_14-05-07.html"
    assert is_report_file(name)

    generated = ReportManager("unused").get_timestamped_report_name()
    assert re.fullmatch(r"ExtentReport_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.html", generated)


def test_finalize_renames_temp_report(tmp_path):
    manager = ReportManager(tmp_path)
    manager.temp_report_path.write_text("<html>run</html>", encoding="utf-8")

    renamed = manager.finalize_report()

    assert renamed is not None
    assert is_report_file(renamed.name)
    assert renamed.read_text(encoding="utf-8") == "<html>run</html>"
    assert not (tmp_path / TEMP_REPORT_NAME).exists()
    assert manager.get_report_count() == 1


def test_finalize_without_temp_report_is_noop(tmp_path):
    manager = ReportManager(tmp_path)

    assert manager.finalize_report() is None
    assert manager.get_report_count() == 0


def test_execution_hooks(tmp_path):
    _make_reports(tmp_path, 4)
    manager = ReportManager(tmp_path, retention_count=2)

    assert len(manager.on_execution_start()) == 2

    manager.temp_report_path.write_text("<html></html>", encoding="utf-8")
    assert manager.on_execution_finish() is not None
    assert manager.get_report_count() == 3


def test_from_settings(settings):
    manager = ReportManager.from_settings(settings)

    assert manager.report_dir == Path(settings.extent_report_path)
    assert manager.retention_count == 3


class _StatPath:
    def __init__(self, stat_result):
        self._stat_result = stat_result

    def stat(self):
        return self._stat_result


def test_creation_time_prefers_birth_time():
    path = _StatPath(SimpleNamespace(st_birthtime=100.0, st_mtime=200.0))

    assert file_creation_time(path) == 100.0


def test_creation_time_falls_back_to_mtime():
    path = _StatPath(SimpleNamespace(st_mtime=200.0))

    assert file_creation_time(path) == 200.0


def test_listing_error_makes_operations_noop(tmp_path, monkeypatch):
    _make_reports(tmp_path, 4)
    manager = ReportManager(tmp_path, retention_count=1)

    def unreadable(self):
        raise PermissionError("listing denied")

    monkeypatch.setattr(Path, "iterdir", unreadable)

    assert manager.cleanup_old_reports() == []
    assert manager.get_report_count() == 0
    assert manager.list_all_reports() == []
