import sys

from rte_ted.main import main

sys.exit(main())
