"""mkdebianrfs: build a Debian root filesystem for a foreign architecture.

Core design goals:
- Thin orchestration over debootstrap, qemu-user-static and chroot
- Fail fast on missing host prerequisites
- Guaranteed cleanup of mounts and temporary directories
- Centralized logging
"""

__all__ = []
