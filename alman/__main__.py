import sys

from alman.cli.cli import main

sys.exit(main())
