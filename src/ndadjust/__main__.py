"""
Command-line entry for the ndadjust package.

Usage
-----
$ python -m ndadjust                # diagnostics on a synthetic volume
$ python -m ndadjust lut --in-level 0.3 0.7 --gamma 0.5
"""

import sys

from .cli.ndadjust_cli import main

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:] or ["diagnostics"]))
