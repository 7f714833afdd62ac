import sys

from cmdshell.demo import main

sys.exit(main())
