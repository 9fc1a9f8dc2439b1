import sys

from probnet.cli import main

sys.exit(main())
