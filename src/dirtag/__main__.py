"""
Main entry point for running dirtag as a module.
Allows: python -m dirtag ...
"""
from .cli import main

if __name__ == "__main__":
    main()
