"""
BioForge HTTP API

Version: api_v1
"""

from .router import get_state, register_error_handlers, reset_state, router

__all__ = ["get_state", "register_error_handlers", "reset_state", "router"]

__version__ = "api_v1"
