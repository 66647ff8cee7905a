#!/usr/bin/env python3
"""
Main driver script for the Metropolis sampler and the numerical experiments

See ``simplemc/cli.py`` for usage.
"""

from simplemc.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
