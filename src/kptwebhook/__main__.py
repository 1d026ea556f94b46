import sys

from kptwebhook.cli import main

sys.exit(main())
