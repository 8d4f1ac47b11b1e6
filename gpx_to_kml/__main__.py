"""Allow ``python -m gpx_to_kml``."""

import sys

from gpx_to_kml.cli import main

sys.exit(main())
