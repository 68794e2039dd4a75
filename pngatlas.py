#!/usr/bin/env python3
"""
pngatlas - pack PNG sprites into a texture atlas, or extract them again.
"""

from spriteatlas.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
