import sys

from flick2influx.main import main

sys.exit(main())
