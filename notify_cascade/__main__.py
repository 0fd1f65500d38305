import sys

from notify_cascade.cli import main

sys.exit(main())
