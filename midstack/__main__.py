import sys

from midstack.console.application import main

if __name__ == "__main__":
    sys.exit(main())
