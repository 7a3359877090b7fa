"""Allow `python -m clipscan_cli`."""

from clipscan_cli import main

if __name__ == "__main__":
    main()
