import sys

from codeAgent.main import main

sys.exit(main())
