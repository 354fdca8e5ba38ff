import sys

from brewcaps.cli import main

sys.exit(main())
