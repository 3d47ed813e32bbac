import sys

from s3fetch.cli import main

sys.exit(main())
