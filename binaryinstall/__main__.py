import sys

from .installation.orchestrator import main

sys.exit(main())
