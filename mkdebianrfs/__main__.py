from __future__ import annotations

from mkdebianrfs.main import main

if __name__ == "__main__":
    raise SystemExit(main())
