"""Command-line interface."""
from chartdigitizer.main import main

if __name__ == "__main__":
    main()
