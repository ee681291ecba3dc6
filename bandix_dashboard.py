#!/usr/bin/env python3
"""
Bandix Dashboard - Live bandwidth monitoring for OpenWRT routers running bandixd.

Uses Textual TUI framework; pass --demo to run against generated data.

This is the entry point script. The implementation is in src/dashboard/.
"""

from src.dashboard import main

if __name__ == "__main__":
    main()
