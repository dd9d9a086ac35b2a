"""
Module entry point for: python -m exmix

Allows running the mixer directly as a module:
    python -m exmix mix <source.tex> --codes 101,102 [options]
    python -m exmix batch <directory> --codes 101,102 [options]
    python -m exmix inspect <source.tex>
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
