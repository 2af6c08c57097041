import sys

from mappers_battle.cli import main

if __name__ == "__main__":
    sys.exit(main())
