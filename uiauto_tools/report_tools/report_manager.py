"""
================================================================================
Report Manager
================================================================================

Housekeeping for HTML run reports stored in the report directory.

Features:
    - Retention sweep that keeps only the newest N ``ExtentReport_*.html`` files
    - Timestamped report names
    - Rename of the temporary run report once the run finishes
    - Run start / run finish listener hooks

Reporting housekeeping must never fail a test run: filesystem errors are
logged and the affected operation becomes a no-op.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from uiauto_tools.common.global_config import Settings


REPORT_PREFIX = "ExtentReport_"
REPORT_SUFFIX = ".html"
TEMP_REPORT_NAME = "ExtentReport.html"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def is_report_file(name: str) -> bool:
    """Check a file name against the ``ExtentReport_*.html`` pattern."""
    return name.startswith(REPORT_PREFIX) and name.endswith(REPORT_SUFFIX)


def file_creation_time(path: Path) -> float:
    """
    Get the creation time of a file.

    Uses the birth time when the filesystem exposes it, otherwise the
    last-modified time.
    """
    stat = path.stat()
    birth_time = getattr(stat, "st_birthtime", None)
    if birth_time:
        return birth_time
    return stat.st_mtime


def get_timestamped_report_name(now: Optional[datetime] = None) -> str:
    """Create a timestamped report filename from the wall-clock time."""
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return f"{REPORT_PREFIX}{timestamp}{REPORT_SUFFIX}"


class ReportManager:
    """
    Manages HTML run report files, including cleanup and naming.

    Usage:
        manager = ReportManager("test-output/ExtentReports", retention_count=10)
        manager.cleanup_old_reports()
        ...
        manager.finalize_report()
    """

    def __init__(self, report_dir: Union[str, Path], retention_count: int = 10):
        """
        Initialize report manager.

        Args:
            report_dir: Directory holding the reports
            retention_count: Number of most recent reports to keep
        """
        self.report_dir = Path(report_dir)
        self.retention_count = max(0, retention_count)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReportManager":
        """Build a manager from the ``extent.report.*`` settings."""
        return cls(settings.extent_report_path, settings.extent_report_retention_count)

    @property
    def temp_report_path(self) -> Path:
        """Path the run report is written to before it gets timestamped."""
        return self.report_dir / TEMP_REPORT_NAME

    def get_timestamped_report_name(self) -> str:
        """Create a timestamped report filename."""
        return get_timestamped_report_name()

    def get_report_path(self) -> Path:
        """Full path for a new timestamped report."""
        return self.report_dir / self.get_timestamped_report_name()

    def _report_files(self) -> List[Path]:
        return [
            entry for entry in self.report_dir.iterdir()
            if entry.is_file() and is_report_file(entry.name)
        ]

    def _sorted_oldest_first(self, files: List[Path]) -> List[Path]:
        keyed = []
        for path in files:
            try:
                keyed.append((file_creation_time(path), path))
            except OSError as e:
                # Vanished between listing and stat
                logger.debug(f"Skipping report {path.name}: {e}")
        keyed.sort(key=lambda item: item[0])
        return [path for _, path in keyed]

    def cleanup_old_reports(self) -> List[str]:
        """
        Delete the oldest reports beyond the retention count.

        Keeps only the most recent ``retention_count`` reports. A missing
        directory is created and nothing is deleted.

        Returns:
            Names of the deleted report files
        """
        deleted: List[str] = []
        try:
            if not self.report_dir.exists():
                self.report_dir.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created report directory: {self.report_dir}")
                return deleted

            report_files = self._report_files()
            if len(report_files) <= self.retention_count:
                logger.info(
                    f"Report cleanup: {len(report_files)} reports found, retention limit is "
                    f"{self.retention_count}. No cleanup needed."
                )
                return deleted

            sorted_files = self._sorted_oldest_first(report_files)
            files_to_delete = len(sorted_files) - self.retention_count

            logger.info(
                f"Report cleanup: Found {len(sorted_files)} reports, retention limit is "
                f"{self.retention_count}. Deleting {files_to_delete} oldest report(s)..."
            )

            for report in sorted_files[:max(0, files_to_delete)]:
                try:
                    report.unlink()
                    deleted.append(report.name)
                    logger.info(f"Deleted old report: {report.name}")
                except OSError as e:
                    logger.warning(f"Failed to delete {report.name}: {e}")

            logger.info(
                f"Report cleanup completed: {len(deleted)} file(s) deleted, "
                f"{len(sorted_files) - len(deleted)} file(s) retained."
            )
        except OSError as e:
            logger.error(f"Error during report cleanup: {e}")

        return deleted

    def list_all_reports(self) -> List[str]:
        """
        List report names, newest first.

        Returns:
            Report file names, empty if the directory is absent
        """
        try:
            if not self.report_dir.exists():
                return []
            sorted_files = self._sorted_oldest_first(self._report_files())
        except OSError as e:
            logger.error(f"Error listing reports: {e}")
            return []
        return [path.name for path in reversed(sorted_files)]

    def get_report_count(self) -> int:
        """Count existing reports, 0 if the directory is absent."""
        try:
            if not self.report_dir.exists():
                return 0
            return len(self._report_files())
        except OSError as e:
            logger.error(f"Error counting reports: {e}")
            return 0

    def finalize_report(self) -> Optional[Path]:
        """
        Rename the temporary run report to a timestamped name.

        An existing report with the same name is replaced.

        Returns:
            Path of the renamed report, or None if nothing was renamed
        """
        source = self.temp_report_path
        if not source.exists():
            logger.info(f"No run report found to rename at: {source.resolve()}")
            return None

        target = self.get_report_path()
        try:
            os.replace(source, target)
        except OSError as e:
            logger.error(f"Error renaming run report: {e}")
            return None

        logger.info(f"Run report renamed: {TEMP_REPORT_NAME} -> {target.name}")
        logger.info(f"Location: {target.resolve()}")
        return target

    # =========================================================================
    # Run Listener Hooks
    # =========================================================================

    def on_execution_start(self) -> List[str]:
        """Clean up old reports before the run starts."""
        logger.info("=" * 40)
        logger.info("Report Cleanup - Starting")
        deleted = self.cleanup_old_reports()
        logger.info(f"Current report count: {self.get_report_count()}")
        logger.info(f"Retention limit: {self.retention_count}")
        logger.info("=" * 40)
        return deleted

    def on_execution_finish(self) -> Optional[Path]:
        """Timestamp the run report after the run finishes."""
        logger.info("=" * 40)
        logger.info("Report Post-Processing - Starting")
        renamed = self.finalize_report()
        if renamed is not None:
            logger.info(f"Total reports stored: {self.get_report_count()}")
        logger.info("=" * 40)
        return renamed


__all__ = [
    "REPORT_PREFIX",
    "REPORT_SUFFIX",
    "TEMP_REPORT_NAME",
    "ReportManager",
    "file_creation_time",
    "get_timestamped_report_name",
    "is_report_file",
]
