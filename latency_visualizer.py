#!/usr/bin/env python3
"""Launcher.

Run either:
  python latency_visualizer.py [HOST ...]
or:
  python -m latency_visualizer.main [HOST ...]
"""

from latency_visualizer.main import main


if __name__ == "__main__":
    main()
