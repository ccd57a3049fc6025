"""
Availability planner - declare when a worker can be matched to jobs.
"""

__version__ = "0.1.0"
