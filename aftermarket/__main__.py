import sys

from aftermarket.cli import main

sys.exit(main())
