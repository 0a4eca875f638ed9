import sys

from branchguard.cli import main

sys.exit(main())
