#!/usr/bin/env python3
"""
Convenience script to run the warband builder without installing it.

Usage:
    python run_warband_builder.py
    python run_warband_builder.py --seed 42
    python run_warband_builder.py --debug
"""

if __name__ == "__main__":
    from warband_engine.main import main
    main()
