#!/usr/bin/env python3
"""
Main entry point for the IRC client
"""

from ircclient.main import run

if __name__ == "__main__":
    run()
