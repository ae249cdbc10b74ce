import sys

from graphite_bridge.cli import main

sys.exit(main())
