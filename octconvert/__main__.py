"""Entry point for ``python -m octconvert``.

Runs the batch converter command line.
"""

import sys

from octconvert.convert import main


if __name__ == "__main__":
    sys.exit(main())
