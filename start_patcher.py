#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
BL2 Patcher - Startup Script

Runs the patcher from a source checkout without installing it.
"""

import os
import sys


def main() -> int:
    repo_root = os.path.dirname(os.path.abspath(__file__))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)

    from bl2patch.main import main as run

    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
