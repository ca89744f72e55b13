"""
Web Module — HTTP serving of the exposition page.
"""

from .server import create_app, run_server

__all__ = ["create_app", "run_server"]
