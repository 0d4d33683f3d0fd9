import sys

from fakecam.cli import main


sys.exit(main())
