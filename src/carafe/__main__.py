"""CLI entry point: python -m carafe --app module:app <command>"""
from carafe.cli import main

if __name__ == "__main__":
    main()
