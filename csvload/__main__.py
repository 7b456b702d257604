import sys

from csvload.cli import main

sys.exit(main())
