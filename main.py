#!/usr/bin/env python3
import sys

from rcpsp_ga.main import cli

if __name__ == "__main__":
    # defaults to the bundled config.yaml when no arguments are given
    cli(sys.argv[1:] or ["--config", "config.yaml"])
