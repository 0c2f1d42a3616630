import sys

from voicegrid.app import main

sys.exit(main())
