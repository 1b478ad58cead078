"""CLI entry point for pymakefile.yaml module.

Usage:
    python -m pymakefile.yaml [-f FILE] [options] [targets...]

Example:
    python -m pymakefile.yaml build/app
    python -m pymakefile.yaml -v -f rules.yaml
    python -m pymakefile.yaml --dry-run
"""

from .runner import main
import sys

if __name__ == '__main__':
    sys.exit(main())
