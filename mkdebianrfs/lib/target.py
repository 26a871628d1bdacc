from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config import RunConfig
from ..errors import TargetError
from .chroot import umount_virtual_fs
from .command import run_cmd

logger = logging.getLogger(__name__)

TAR_COMPRESSION = [
    (".tar.gz", "--gzip"),
    (".tar.bz2", "--bzip2"),
    (".tar.xz", "--xz"),
    (".tar.lzma", "--lzma"),
    (".tar.lz", "--lzip"),
    (".tar.lzo", "--lzop"),
    (".tar.zst", "--zstd"),
    (".tar.Z", "--compress"),
]


def archive_dir_name(name: str) -> str:
    """Name of the directory stored in the archive: 'out.tar.bz2' -> 'out'."""

    base = os.path.basename(name.rstrip("/"))
    idx = base.rfind(".tar")
    if idx <= 0:
        raise TargetError("output file name is invalid")
    return base[:idx]


def archive_compression(name: str) -> Optional[str]:
    """tar compression flag for an archive name, None for a plain tar."""

    for suffix, flag in TAR_COMPRESSION:
        if name.endswith(suffix):
            return flag
    return None


@dataclass
class TargetTree:
    root: Path
    tmp_dir: Optional[Path] = None
    archive: Optional[Path] = None
    dry_run: bool = False
    _cleaned: bool = field(default=False, init=False, repr=False)

    @property
    def archive_mode(self) -> bool:
        return self.archive is not None

    def path(self, rel: str) -> Path:
        return self.root / rel.lstrip("/")

    def cleanup(self) -> None:
        """Undo mounts and temporary state. Safe to call more than once."""

        if self._cleaned:
            return
        self._cleaned = True

        umount_virtual_fs(str(self.root), dry_run=self.dry_run)

        if self.tmp_dir is None:
            return
        if self.dry_run:
            logger.info("Would remove %s", self.tmp_dir)
            return
        logger.info("Removing %s...", self.tmp_dir)
        shutil.rmtree(self.tmp_dir, ignore_errors=True)


def prepare_target(cfg: RunConfig) -> TargetTree:
    if cfg.tar:
        return _prepare_archive_target(cfg)
    return _prepare_directory_target(cfg)


def _prepare_directory_target(cfg: RunConfig) -> TargetTree:
    root = Path(cfg.target).resolve()
    if not cfg.target or not root.is_dir():
        raise TargetError(f"directory '{cfg.target}' does not exist")

    if cfg.dry_run:
        logger.info("Would chown root:root %s", root)
    else:
        os.chown(root, 0, 0)
    return TargetTree(root=root, dry_run=cfg.dry_run)


def _prepare_archive_target(cfg: RunConfig) -> TargetTree:
    name = archive_dir_name(cfg.target)
    archive = Path(os.path.abspath(cfg.target))

    if cfg.dry_run:
        tmp_dir = Path(tempfile.gettempdir()) / "mkdebianrfs.dry-run"
        logger.info("Would build %s in %s", archive, tmp_dir / name)
        return TargetTree(root=tmp_dir / name, tmp_dir=tmp_dir, archive=archive, dry_run=True)

    tmp_dir = Path(tempfile.mkdtemp(prefix="mkdebianrfs."))
    tree = TargetTree(root=tmp_dir / name, tmp_dir=tmp_dir, archive=archive)
    try:
        tree.root.mkdir()
    except OSError:
        shutil.rmtree(tmp_dir, ignore_errors=True)
        raise
    logger.info("Building %s in %s", archive, tree.root)
    return tree


def archive_argv(tree: TargetTree) -> List[str]:
    if tree.archive is None or tree.tmp_dir is None:
        raise TargetError("target was not prepared in archive mode")

    argv = ["tar", "-c"]
    flag = archive_compression(tree.archive.name)
    if flag:
        argv.append(flag)
    argv += ["-p", "-f", str(tree.archive), "-C", str(tree.tmp_dir), tree.root.name]
    return argv


def create_archive(tree: TargetTree) -> None:
    logger.info("Creating %s...", tree.archive)
    run_cmd(archive_argv(tree), dry_run=tree.dry_run)
