#!/usr/bin/env python3
"""VibeFlo entry point.

Run with:
    python main.py
    python -m vibeflo
"""

from vibeflo.__main__ import main


if __name__ == "__main__":
    main()
