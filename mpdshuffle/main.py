# mpdshuffle/main.py
import sys

from mpdshuffle.ui.cli import main

if __name__ == "__main__":
    sys.exit(main())
