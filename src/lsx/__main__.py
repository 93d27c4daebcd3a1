"""Allow running as ``python -m lsx``."""

from lsx.cli import main

if __name__ == "__main__":
    main(prog_name="lsx")
