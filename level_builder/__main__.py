import sys

from level_builder.cli import main

sys.exit(main())
