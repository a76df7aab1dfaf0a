"""Entry point for 'python -m helpful'."""

from helpful.cli import main

if __name__ == "__main__":
    main()
