"""Keeps ``python -m bl2patch`` working."""

from .main import main

raise SystemExit(main())
