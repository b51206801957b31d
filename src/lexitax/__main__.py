import sys

from lexitax.cli import main

sys.exit(main())
