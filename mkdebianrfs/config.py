from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from .errors import ConfigError

DEFAULT_MIRROR = "http://ftp.uk.debian.org/debian/"
DEFAULT_SECURITY_MIRROR = "http://security.debian.org/"
DEFAULT_PACKAGES: Tuple[str, ...] = ("locales",)
DEFAULT_HOSTNAME = "debian"

# Suites that never receive an -updates or security suite.
ROLLING_DISTS = frozenset({"experimental", "unstable", "sid"})


@dataclass(frozen=True)
class Profile:
    """Optional site defaults read from a YAML file."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        value = self.raw.get(name) or {}
        if not isinstance(value, dict):
            raise ConfigError(f"config '{name}' must be a mapping")
        return value

    @property
    def mirror(self) -> str | None:
        value = self.raw.get("mirror")
        return str(value) if value else None

    @property
    def security_mirror(self) -> str:
        return str(self.raw.get("security_mirror") or DEFAULT_SECURITY_MIRROR)

    @property
    def include(self) -> List[str]:
        value = self.raw.get("include") or []
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, list):
            raise ConfigError("config 'include' must be a list of package names")
        return [str(v).strip() for v in value if str(v).strip()]

    @property
    def hostname(self) -> str:
        return str(self.raw.get("hostname") or DEFAULT_HOSTNAME).strip() or DEFAULT_HOSTNAME

    @property
    def serial_id(self) -> str:
        return str(self._section("serial_console").get("id") or "T0")

    @property
    def serial_tty(self) -> str:
        return str(self._section("serial_console").get("tty") or "ttyS0")

    @property
    def serial_baud(self) -> int:
        value = self._section("serial_console").get("baud") or 115200
        try:
            baud = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"config 'serial_console.baud' must be an integer, got {value!r}") from e
        if baud <= 0:
            raise ConfigError(f"config 'serial_console.baud' must be positive, got {baud}")
        return baud

    @property
    def serial_term(self) -> str:
        return str(self._section("serial_console").get("term") or "vt100")

    @property
    def network_interface(self) -> str:
        return str(self._section("network").get("interface") or "eth0")

    @property
    def interactive_shell(self) -> bool:
        value = self.raw.get("interactive_shell", True)
        if not isinstance(value, bool):
            raise ConfigError("config 'interactive_shell' must be true or false")
        return value

    def validate(self) -> "Profile":
        """Read every setting once so bad values fail before any work starts."""

        for name in (
            "mirror",
            "security_mirror",
            "include",
            "hostname",
            "serial_id",
            "serial_tty",
            "serial_baud",
            "serial_term",
            "network_interface",
            "interactive_shell",
        ):
            getattr(self, name)
        return self


def load_profile(path: str) -> Profile:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"config file '{path}' does not exist")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config file must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")

    return Profile(raw=raw).validate()


def merge_packages(*groups: List[str] | Tuple[str, ...]) -> Tuple[str, ...]:
    """Flatten package groups, dropping empty names and repeats."""

    seen: List[str] = []
    for group in groups:
        for name in group:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
    return tuple(seen)


@dataclass(frozen=True)
class RunConfig:
    arch: str
    dist: str
    target: str
    tar: bool = False
    packages: Tuple[str, ...] = DEFAULT_PACKAGES
    mirror: str = DEFAULT_MIRROR
    profile: Profile = field(default_factory=Profile)
    dry_run: bool = False

    @property
    def emulator_name(self) -> str:
        return f"qemu-{self.arch}-static"

    @property
    def emulator_target_path(self) -> str:
        # binfmt_misc must point at this path inside the target root.
        return f"/usr/bin/{self.emulator_name}"

    @property
    def has_updates_suite(self) -> bool:
        return self.dist not in ROLLING_DISTS
