from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from app.viewmodels.main_vm import LibraryVM
from infrastructure.csv_repository import CsvMediaLibrary
from infrastructure.logging import init_logging
from infrastructure.settings import BrowserConfig, JsonSettings


BASE_DIR = Path(__file__).parent


def _index_path(config: BrowserConfig, argv: list[str]) -> Path:
    # Command-line path beats settings; fall back to the bundled sample
    if len(argv) > 1:
        return Path(argv[1])
    if config.index_path:
        return Path(config.index_path)
    return BASE_DIR / "samples" / "index.csv"


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv if argv is None else argv
    init_logging()
    settings = JsonSettings(BASE_DIR / "settings.json")
    config = BrowserConfig.from_settings(settings)

    library = CsvMediaLibrary(
        _index_path(config, argv), album=config.album, delete_log_dir=config.delete_log_dir
    )
    vm = LibraryVM(library, config=config)
    vm.refresh()

    for day in vm.day_view_models():
        print(f"{day.day_title} {day.weekday_short}  {day.count} clips  {day.duration_label or ''}")
    for cluster in vm.places:
        c = cluster.centroid
        print(f"place {c.latitude:.4f},{c.longitude:.4f}  {len(cluster.days)} days")

    logger.info("Library summary printed for {}", library.index_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
