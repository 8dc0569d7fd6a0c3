"""
BioForge Protocol Planner

Plan data model, import parsers and derivation pipeline for a personal
protocol-planning and tracking tool.

Usage:
    from bioforge.session import AppState

    state = AppState()
    state.quick_add("Add Urolithin A 500mg daily for 12 weeks")
"""

__version__ = "1.0.0"
