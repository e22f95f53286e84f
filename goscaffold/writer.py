"""Export generated files to disk.

Records come from a remote model, so every path is checked before writing:
absolute paths, paths that name the output directory itself, anything that
would escape it, and records whose path is a parent directory of another
record are all rejected before a single file is created.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path, PurePosixPath

from goscaffold.models import GeneratedFileRecord
from goscaffold.utils import ensure_dir


class UnsafePathError(ValueError):
    """Raised when a generated path cannot be written inside the output directory."""

    def __init__(self, path: str, reason: str = "outside the output directory") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Refusing to write {path!r}: {reason}")


def resolve_target(root: Path, relative: str) -> Path:
    """Map a generated *relative* path onto *root*.

    Raises:
        UnsafePathError: If the path is empty, absolute, names *root* itself
            or climbs out of *root*.
    """
    posix = PurePosixPath(relative.replace("\\", "/"))
    if not relative.strip() or not posix.parts:
        raise UnsafePathError(relative, "empty path")
    if posix.is_absolute() or ".." in posix.parts:
        raise UnsafePathError(relative)
    base = root.resolve()
    target = (base / Path(*posix.parts)).resolve()
    if target == base:
        raise UnsafePathError(relative, "names the output directory itself")
    if not target.is_relative_to(base):
        raise UnsafePathError(relative)
    return target


def _check_collisions(files: Sequence[GeneratedFileRecord], targets: list[Path]) -> None:
    """Reject batches where one file would have to be a directory of another."""
    by_target = dict(zip(targets, files))
    for target, record in by_target.items():
        for parent in target.parents:
            if parent in by_target:
                raise UnsafePathError(
                    by_target[parent].path, f"is also the parent directory of {record.path!r}"
                )


async def write_files(
    files: Sequence[GeneratedFileRecord], output_dir: str | Path
) -> list[Path]:
    """Write every record beneath *output_dir*.

    Returns:
        The absolute paths written, in record order.

    Raises:
        UnsafePathError: If any record fails validation; nothing is written.
        OSError: If the file system rejects a write.
    """
    root = Path(output_dir)
    targets = [resolve_target(root, record.path) for record in files]
    _check_collisions(files, targets)
    ensure_dir(root)

    def _write(target: Path, content: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    for target, record in zip(targets, files):
        await asyncio.to_thread(_write, target, record.content)
    return targets
