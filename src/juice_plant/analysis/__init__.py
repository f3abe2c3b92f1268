# src/juice_plant/analysis/__init__.py

"""
Optional analysis tools for plant timelines.

Nothing is imported here: the submodules need the '[analysis]'
extra, so import them explicitly, e.g.:

from juice_plant.analysis.throughput import calculate_throughput
"""
