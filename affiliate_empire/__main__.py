import sys

from affiliate_empire.cli import main

sys.exit(main())
