import sys

from deeplx_pool.cli import main

sys.exit(main())
