import sys

from ringlink.main import main

sys.exit(main())
