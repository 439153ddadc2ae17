import sys

from unitbuild.cli import main

sys.exit(main())
