"""Prometheus metrics for uploads and folder provisioning."""

from __future__ import annotations

import os
from pathlib import Path

_prom_dir = os.getenv("PROMETHEUS_MULTIPROC_DIR")
if not _prom_dir:
    default_dir = Path(os.getenv("PROMETHEUS_MULTIPROC_DIR_DEFAULT", "/tmp/mediateca-prom"))
    default_dir.mkdir(parents=True, exist_ok=True)
    os.environ["PROMETHEUS_MULTIPROC_DIR"] = str(default_dir)
    _prom_dir = str(default_dir)
else:
    Path(_prom_dir).mkdir(parents=True, exist_ok=True)

from prometheus_client import Counter, Gauge, Histogram  # noqa: E402

upload_files_total = Counter(
    "upload_files_total",
    "Uploaded files by outcome.",
    ["result"],
)
upload_duration_seconds = Histogram(
    "upload_duration_seconds",
    "Time spent storing and recording the files of one upload request.",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, float("inf")),
)
folders_created_total = Counter(
    "upload_folders_created_total",
    "Folders created, by origin (explicit request or default provisioning).",
    ["origin"],
)
default_folder_provisioned_total = Counter(
    "upload_default_folder_provisioned_total",
    "Times the default upload folder had to be provisioned.",
    ["reason"],
)
name_conflicts_total = Counter(
    "upload_name_conflicts_total",
    "Sibling name clashes detected while persisting folders.",
)
folders_registered = Gauge(
    "upload_folders_registered",
    "Current number of folders registered in the database.",
    multiprocess_mode="livesum",
)


def cleanup_multiprocess_directory() -> None:
    """Remove leftover metric shard files when using multiprocess mode."""

    prom_path = Path(_prom_dir or "")
    if not prom_path.exists():  # pragma: no cover - defensive guard
        return

    for child in prom_path.iterdir():
        if not child.is_file():
            continue
        try:
            child.unlink()
        except FileNotFoundError:  # pragma: no cover - benign race condition
            continue


__all__ = [
    "upload_files_total",
    "upload_duration_seconds",
    "folders_created_total",
    "default_folder_provisioned_total",
    "name_conflicts_total",
    "folders_registered",
    "cleanup_multiprocess_directory",
]
