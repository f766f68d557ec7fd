import sys

from clinote.cli import main

sys.exit(main())
