#!/usr/bin/env python3
"""
Convenience entry point for running coworkbooking directly.

Usage: python cowork_preview.py [command] [options]
"""

from coworkbooking.cli.app import app

if __name__ == "__main__":
    app()
