from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Optional, Sequence

from .config import DEFAULT_MIRROR, DEFAULT_PACKAGES, Profile, RunConfig, load_profile, merge_packages

PROG = "mkdebianrfs"

DESCRIPTION = """\
Creates a Debian root FS from the specified <dist> (e.g. stable, wheezy,
testing, etc.) for <arch> using debootstrap and configures it such that it
is bootable. Unless --tar is specified, <target> will be taken as a
directory name to create the root FS in.

Requires root, debootstrap, and qemu-<arch>-static in PATH registered with
binfmt_misc as /usr/bin/qemu-<arch>-static.

Options must come before <arch>, and option values are attached with '='
(e.g. --include=vim,less)."""

EPILOG = f"""\
Example:

  {PROG} mips wheezy /mnt
  {PROG} --tar mipsel wheezy debian-wheezy-mipsel.tar.bz2"""


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        sys.stderr.write(f"{self.prog}: {message}\n")
        self.print_help(sys.stderr)
        raise SystemExit(1)


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(
        prog=PROG,
        usage="%(prog)s [options...] <arch> <dist> <target>",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    p.add_argument("arch", metavar="<arch>", help="Debian architecture name (e.g. mips, armhf)")
    p.add_argument("dist", metavar="<dist>", help="Distribution or suite (e.g. wheezy, stable, sid)")
    p.add_argument("target", metavar="<target>", help="Target directory, or archive name with --tar")
    p.add_argument(
        "--tar",
        action="store_true",
        help="Create a tar file instead of installing to a directory. <target> names the "
        "output file, compressed based on its file extension.",
    )
    p.add_argument(
        "--include",
        metavar="<packages>",
        action="append",
        default=[],
        help="Comma separated list of extra packages to install in the filesystem.",
    )
    p.add_argument(
        "--mirror",
        metavar="<mirror>",
        default=None,
        help=f"URL of Debian mirror to use (defaults to {DEFAULT_MIRROR}).",
    )
    p.add_argument("--config", metavar="<file>", default=None, help="YAML file with site defaults")
    p.add_argument("--log", metavar="<file>", default=None, help="Also write the log to this file")
    p.add_argument("--dry-run", action="store_true", help="Log commands and file writes without executing them")
    p.add_argument("-v", "--verbose", action="store_true", help="Log command output")
    return p


def operands_last(argv: Sequence[str]) -> list[str]:
    """Stop option parsing at the first operand, like getopts.

    Options after <arch> become extra operands, and option values must be
    attached with '=' ('--include=vim', not '--include vim').
    """

    args = list(argv)
    for i, a in enumerate(args):
        if a == "--":
            break
        if a == "-" or not a.startswith("-"):
            return [*args[:i], "--", *args[i:]]
    return args


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = build_parser()
    args = p.parse_args(operands_last(sys.argv[1:] if argv is None else argv))
    if not args.arch.strip() or not args.dist.strip() or not args.target.strip():
        p.error("invalid argument")
    return args


def build_run_config(args: argparse.Namespace) -> RunConfig:
    """Turn parsed arguments into the immutable run configuration."""

    profile = load_profile(args.config) if args.config else Profile()

    extra = [name for csv in args.include for name in csv.split(",")]
    packages = merge_packages(DEFAULT_PACKAGES, profile.include, extra)
    mirror = args.mirror or profile.mirror or DEFAULT_MIRROR

    return RunConfig(
        arch=args.arch,
        dist=args.dist,
        target=args.target,
        tar=bool(args.tar),
        packages=packages,
        mirror=mirror,
        profile=profile,
        dry_run=bool(args.dry_run),
    )


def log_level(args: argparse.Namespace) -> int:
    return logging.DEBUG if args.verbose else logging.INFO
