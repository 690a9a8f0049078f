"""CLI entry point: python -m hashbench hash --batch-size 500 --trials 1000"""

from .run import main

main()
