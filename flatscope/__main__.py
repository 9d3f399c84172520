import sys

from flatscope.cli import main

sys.exit(main())
