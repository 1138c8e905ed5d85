from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from app.viewmodels.photo_vm import MediaVM
from core.formatting import total_duration_label


@dataclass
class DayVM:
    date: datetime
    items: List[MediaVM] = field(default_factory=list)

    @property
    def day_title(self) -> str:
        return self.date.strftime("%Y/%m/%d")

    @property
    def weekday_short(self) -> str:
        return self.date.strftime("%a")

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def duration_label(self) -> str | None:
        return total_duration_label(i.record for i in self.items)
