import sys

from github_memory.cli import main

sys.exit(main())
