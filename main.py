#!/usr/bin/env python3
"""
Petverse battle engine - command line entry point.

Thin wrapper around :func:`petverse.cli.run`:
- simulate: run a demo battle and print the rich battle log
- abilities / techniques: browse the static catalog

To run: python main.py simulate --seed 7
"""
import sys

from petverse.cli import run

if __name__ == "__main__":
    sys.exit(run())
