"""Deletion planning and execution service.

Provides a high-level API to plan deletions across day buckets, and to execute
deletes by moving clip files to the trash while writing an audit CSV log.
"""

from __future__ import annotations

from collections.abc import Iterable
import csv
from datetime import datetime
import os
from pathlib import Path

from loguru import logger
from send2trash import send2trash

from core.formatting import format_clock
from core.models import DayBucket, MediaRecord
from core.services.interfaces import DeletePlan, DeletePlanDaySummary, DeleteResult
from infrastructure.logging import get_delete_log_directory


class DeleteService:
    """Coordinates delete operations and audit logging."""

    def plan_delete(self, buckets: Iterable[DayBucket], selected_ids: Iterable[str]) -> DeletePlan:
        """Compute a delete plan from selected ids, dropping ids no day holds."""
        selected = list(dict.fromkeys(selected_ids))
        selected_set = set(selected)
        by_id: dict[str, MediaRecord] = {}
        summaries: list[DeletePlanDaySummary] = []
        for bucket in buckets:
            sel_count = 0
            for record in bucket.assets:
                by_id[record.id] = record
                if record.id in selected_set:
                    sel_count += 1
            total = len(bucket.assets)
            summaries.append(
                DeletePlanDaySummary(
                    day=bucket.date.date().isoformat(),
                    selected_count=sel_count,
                    total_count=total,
                    is_full_delete=(total > 0 and sel_count == total),
                )
            )

        delete_ids = [i for i in selected if i in by_id]
        skipped = len(selected) - len(delete_ids)
        if skipped:
            logger.info("Delete plan skips {} ids not present in the library", skipped)
        return DeletePlan(
            delete_ids=delete_ids,
            day_summaries=summaries,
            total_duration=sum(by_id[i].duration_seconds for i in delete_ids),
        )

    @staticmethod
    def confirmation_message(plan: DeletePlan) -> str:
        """Text for the bulk delete confirmation prompt."""
        return (
            f"Items: {plan.count}  Total: {format_clock(plan.total_duration)}\n"
            "This cannot be undone"
        )

    def delete_to_trash(self, records: Iterable[MediaRecord]) -> DeleteResult:
        """Send clip files to the trash and report per-record results."""
        success: list[str] = []
        failed: list[tuple[str, str]] = []
        for record in records:
            if not record.file_path:
                failed.append((record.id, "No file path"))
                continue
            normalized_path = os.path.normpath(record.file_path)
            if not os.path.exists(normalized_path):
                logger.error("File does not exist: {}", normalized_path)
                failed.append((record.id, "File does not exist"))
                continue
            try:
                send2trash(normalized_path)
                success.append(record.id)
            except (UnicodeEncodeError, OSError) as ex:
                logger.warning("Trash failed for {}: {}; retrying with absolute path", normalized_path, ex)
                try:
                    send2trash(os.path.abspath(record.file_path))
                    success.append(record.id)
                except (UnicodeEncodeError, OSError) as ex2:
                    logger.error("All delete methods failed for {}: {} / {}", record.file_path, ex, ex2)
                    failed.append((record.id, f"Multiple delete failures: {ex}, {ex2}"))
        return DeleteResult(success_ids=success, failed=failed)

    def execute_delete(
        self,
        records: Iterable[MediaRecord],
        log_dir: str | None = None,
        unresolved: Iterable[tuple[str, str]] = (),
    ) -> DeleteResult:
        """Trash the records' files and write an audit CSV log.

        Args:
            records: Records to delete.
            log_dir: Optional directory to write the audit log; defaults to
                `get_delete_log_directory()`.
            unresolved: (id, reason) pairs for requested ids that had no
                record; logged as failures.
        """
        items = list(records)
        result = self.delete_to_trash(items)
        result.failed.extend(unresolved)
        try:
            base_dir = Path(os.path.expandvars(log_dir) if log_dir else get_delete_log_directory())
            base_dir.mkdir(parents=True, exist_ok=True)
            ts = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_path = base_dir / f"delete_{ts}.csv"
            paths = {r.id: r.file_path or "" for r in items}
            with log_path.open("w", encoding="utf-8", newline="") as f:
                writer = csv.writer(f)
                writer.writerow(["Id", "FilePath", "Success", "Reason"])
                for record_id in result.success_ids:
                    writer.writerow([record_id, paths.get(record_id, ""), 1, ""])
                for record_id, reason in result.failed:
                    writer.writerow([record_id, paths.get(record_id, ""), 0, reason])
            result.log_path = str(log_path)
            logger.info(
                "Delete log written: {} ({} success, {} failed)",
                log_path,
                len(result.success_ids),
                len(result.failed),
            )
        except (OSError, ValueError) as ex:
            logger.error("Write delete log failed: {}", ex)
        return result
