"""State/store layer.

This package is the single source of truth for what the map shows:
position, active route, destination marker, POI layer, results list and
notifications. Orchestrator stages emit transitions; only the store
applies them.
"""
