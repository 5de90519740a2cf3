import sys

from hexconf.main import main

sys.exit(main())
