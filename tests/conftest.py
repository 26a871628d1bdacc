import os
import shutil
import subprocess

import pytest

import mkdebianrfs.lib.command
import mkdebianrfs.lib.host
import mkdebianrfs.main


class FakeRun:
    """Records subprocess.run calls; fail maps an argv prefix to a return code,
    fail_if holds predicates on argv that make the call exit 1."""

    def __init__(self):
        self.calls = []
        self.kwargs = []
        self.fail = {}
        self.fail_if = []
        self.hooks = []

    def __call__(self, argv, **kwargs):
        self.calls.append(list(argv))
        self.kwargs.append(kwargs)
        for hook in self.hooks:
            hook(argv)
        rc = 0
        for prefix, code in self.fail.items():
            if tuple(argv[: len(prefix)]) == prefix:
                rc = code
        if any(pred(argv) for pred in self.fail_if):
            rc = 1
        return subprocess.CompletedProcess(argv, rc, stdout="", stderr="")

    def find(self, *prefix):
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(mkdebianrfs.main, "configure_logging", lambda **kw: None)


@pytest.fixture
def fake_run(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr(mkdebianrfs.lib.command.subprocess, "run", fake)
    return fake


@pytest.fixture
def chowns(monkeypatch):
    calls = []
    monkeypatch.setattr(os, "chown", lambda path, uid, gid: calls.append((str(path), uid, gid)))
    return calls


@pytest.fixture
def host(monkeypatch, tmp_path):
    """A host that passes every precondition for the mips architecture."""

    bindir = tmp_path / "hostbin"
    bindir.mkdir()
    emulator = bindir / "qemu-mips-static"
    emulator.write_bytes(b"\x7fELF fake qemu")
    debootstrap = bindir / "debootstrap"
    debootstrap.write_text("#!/bin/sh\n")

    binfmt = tmp_path / "binfmt_misc"
    binfmt.mkdir()
    (binfmt / "status").write_text("enabled\n")
    (binfmt / "qemu-mips").write_text(
        "enabled\ninterpreter /usr/bin/qemu-mips-static\nflags: OCF\noffset 0\n"
    )

    tools = {"debootstrap": str(debootstrap), "qemu-mips-static": str(emulator)}
    monkeypatch.setattr(os, "geteuid", lambda: 0)
    monkeypatch.setattr(shutil, "which", lambda name: tools.get(name))
    monkeypatch.setattr(mkdebianrfs.lib.host, "BINFMT_DIR", str(binfmt))
    return {"binfmt": binfmt, "emulator": emulator, "debootstrap": debootstrap, "tools": tools}
