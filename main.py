#!/usr/bin/env python3
"""
Main script for running the mathlens evaluation engine from a checkout.
"""

# Command overview:
# 1) catalog      list the preset functions by topic.
# 2) limit        approach tables, limit kind and continuity class.
# 3) derivative   finite differences, secant sequence and critical points.
# 4) integrate    one Riemann sum plus its convergence table.
# 5) distribution moments and quantiles of a named preset.
# 6) bootstrap    percentile interval for the mean of the given values.
# 7) regression   least-squares fit and influence table for an Anscombe set.

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from mathlens.cli import main

if __name__ == "__main__":
    sys.exit(main())
