"""Main entry point when executing recogate as a package.

This allows running the package using python -m recogate.
"""

from recogate.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
