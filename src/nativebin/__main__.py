import sys

from nativebin.cli import main

sys.exit(main())
