"""python -m lattice_codes"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
