import sys

from proofline.cli import main

sys.exit(main())
