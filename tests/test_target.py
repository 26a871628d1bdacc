import os

import pytest

from mkdebianrfs.config import RunConfig
from mkdebianrfs.errors import TargetError
from mkdebianrfs.lib.target import (
    TargetTree,
    archive_argv,
    archive_compression,
    archive_dir_name,
    prepare_target,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("out.tar.bz2", "out"),
        ("debian-wheezy-mipsel.tar.bz2", "debian-wheezy-mipsel"),
        ("out.tar", "out"),
        ("/some/where/rfs.tar.xz", "rfs"),
        ("my.tar.files.tar.gz", "my.tar.files"),
    ],
)
def test_archive_dir_name(name, expected):
    assert archive_dir_name(name) == expected


@pytest.mark.parametrize("name", ["out", "out.tgz", ".tar.gz", "", "/tmp/"])
def test_archive_dir_name_invalid(name):
    with pytest.raises(TargetError, match="output file name is invalid"):
        archive_dir_name(name)


@pytest.mark.parametrize(
    "name, flag",
    [
        ("out.tar.bz2", "--bzip2"),
        ("out.tar.gz", "--gzip"),
        ("out.tar.xz", "--xz"),
        ("out.tar.zst", "--zstd"),
        ("out.tar.lzma", "--lzma"),
        ("out.tar", None),
    ],
)
def test_archive_compression(name, flag):
    assert archive_compression(name) == flag


def test_directory_mode(tmp_path, chowns):
    tree = prepare_target(RunConfig(arch="mips", dist="wheezy", target=str(tmp_path)))
    assert tree.root == tmp_path.resolve()
    assert tree.archive_mode is False
    assert tree.tmp_dir is None
    assert chowns == [(str(tmp_path.resolve()), 0, 0)]


def test_directory_mode_missing_directory(tmp_path, chowns):
    with pytest.raises(TargetError, match="does not exist"):
        prepare_target(RunConfig(arch="mips", dist="wheezy", target=str(tmp_path / "nope")))
    assert chowns == []


def test_archive_mode(tmp_path, monkeypatch, fake_run):
    monkeypatch.chdir(tmp_path)
    tree = prepare_target(RunConfig(arch="mips", dist="wheezy", target="out.tar.bz2", tar=True))
    try:
        assert tree.archive_mode
        assert tree.root.name == "out"
        assert tree.root.parent == tree.tmp_dir
        assert tree.root.is_dir()
        assert archive_argv(tree) == [
            "tar",
            "-c",
            "--bzip2",
            "-p",
            "-f",
            os.path.join(os.getcwd(), "out.tar.bz2"),
            "-C",
            str(tree.tmp_dir),
            "out",
        ]
    finally:
        tree.cleanup()
    assert not tree.tmp_dir.exists()


def test_cleanup_attempts_both_unmounts_once(tmp_path, fake_run):
    fake_run.fail[("umount",)] = 32
    tree = TargetTree(root=tmp_path)
    tree.cleanup()
    tree.cleanup()
    assert fake_run.calls == [
        ["umount", f"{tmp_path}/proc"],
        ["umount", f"{tmp_path}/sys"],
    ]


def test_cleanup_survives_missing_umount(tmp_path, monkeypatch):
    import mkdebianrfs.lib.command

    def missing(argv, **kwargs):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr(mkdebianrfs.lib.command.subprocess, "run", missing)
    TargetTree(root=tmp_path).cleanup()


def test_archive_mode_dry_run_creates_nothing(monkeypatch, tmp_path, fake_run):
    import tempfile

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(tempfile, "mkdtemp", lambda **kw: pytest.fail("mkdtemp called"))
    tree = prepare_target(RunConfig(arch="mips", dist="wheezy", target="out.tar.gz", tar=True, dry_run=True))
    assert tree.root.name == "out"
    assert not tree.tmp_dir.exists()
    tree.cleanup()
    assert fake_run.calls == []


def test_archive_mode_removes_workdir_when_mkdir_fails(monkeypatch, tmp_path):
    import pathlib
    import tempfile

    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setattr(tempfile, "mkdtemp", lambda **kw: str(workdir))

    def no_space(self, *args, **kwargs):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(pathlib.Path, "mkdir", no_space)
    with pytest.raises(OSError):
        prepare_target(RunConfig(arch="mips", dist="wheezy", target="out.tar.gz", tar=True))
    assert not workdir.exists()
