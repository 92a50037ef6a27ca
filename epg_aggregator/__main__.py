import sys

from epg_aggregator.main import main


sys.exit(main())
