"""Run the bucket validation: python -m scoop_bucket"""

import sys

from scoop_bucket.validation.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
