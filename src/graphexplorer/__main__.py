"""Command-line interface."""
from graphexplorer.main import main

if __name__ == "__main__":
    main()
