import sys

from admintool.cli.main import main

sys.exit(main())
