"""
Entry point for running the autoperft package as a module.

Usage:
    python -m autoperft --help
    python -m autoperft path/to/generator --epd standard.epd
"""

from autoperft.cli import main

if __name__ == "__main__":
    main()
