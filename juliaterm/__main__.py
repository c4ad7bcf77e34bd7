import sys

from juliaterm.cli import main

sys.exit(main())
