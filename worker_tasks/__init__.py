"""
Worker Tasks Module.

This module decides whether a worker's daily task assignment may be started
or moved forward, based on the project geofence, prerequisite assignments
and the same-day task sequence.
"""

__version__ = '0.1.0'
