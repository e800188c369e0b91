import sys

from quorumguard.main import main

sys.exit(main())
