"""Entry point for ``python -m payslip_engine``."""

import sys

from payslip_engine.cli import main

if __name__ == "__main__":
    sys.exit(main())
