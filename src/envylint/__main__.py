"""
Main entry point for envylint when run as a module.

Allows execution via: python -m envylint

envylint/src/envylint/__main__.py
"""

from .cli import main

if __name__ == "__main__":
    main()
