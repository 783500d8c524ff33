import sys

from .scripts.show import main

if __name__ == '__main__':
    sys.exit(main())
