from __future__ import annotations

from slate.main import main

if __name__ == "__main__":
    raise SystemExit(main())
