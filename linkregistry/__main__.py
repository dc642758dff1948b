import sys

from linkregistry.cli import main


sys.exit(main())
