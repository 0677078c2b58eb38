import sys
from msc.cli import main

sys.exit(main())
