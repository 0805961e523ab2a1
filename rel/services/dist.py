"""Archive packaging for release assets.

Output names are deterministic: ``<binary>_<version>_<triple>.<ext>``. Each
archive gets a ``.sha256`` sidecar in ``sha256sum`` format.
"""

from __future__ import annotations

import hashlib
import tarfile
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from rel.core.config import ArchiveFormat

_TAR_MODES: dict[str, str] = {
    "tar.gz": "w:gz",
    "tar.xz": "w:xz",
    "tar.bz2": "w:bz2",
}


def archive_name(*, binary: str, version: str, triple: str, fmt: ArchiveFormat) -> str:
    return f"{binary}_{version}_{triple}.{fmt}"


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def collect_extra_files(project_root: Path, names: tuple[str, ...]) -> list[tuple[Path, str]]:
    """Extra files that exist in the project root, as (source, arcname)."""
    out: list[tuple[Path, str]] = []
    for name in names:
        p = project_root / name
        if p.is_file():
            out.append((p, p.name))
    return out


def create_archive(archive_path: Path, *, fmt: ArchiveFormat, files: list[tuple[Path, str]]) -> Path:
    """Write ``files`` into a new archive.

    Raises:
        ValueError: Unsupported format.
        OSError: Any filesystem failure while writing.
    """
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    if archive_path.exists():
        archive_path.unlink()

    if fmt == "zip":
        # Toolchain outputs can carry mtime=0, which ZIP cannot represent.
        with ZipFile(archive_path, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
            for src, arc in files:
                zf.write(src, arcname=arc)
        return archive_path

    mode = _TAR_MODES.get(fmt)
    if mode is None:
        raise ValueError(f"unsupported archive format: {fmt}")
    with tarfile.open(archive_path, mode) as tf:
        for src, arc in files:
            tf.add(src, arcname=arc, recursive=False)
    return archive_path


def write_checksum(archive_path: Path) -> Path:
    """Write ``<archive>.sha256`` next to the archive."""
    out = archive_path.with_name(archive_path.name + ".sha256")
    out.write_text(f"{sha256_file(archive_path)}  {archive_path.name}\n", encoding="utf-8")
    return out
