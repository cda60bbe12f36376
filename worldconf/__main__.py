import sys

from worldconf.cli import main

sys.exit(main())
