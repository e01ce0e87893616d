"""
Taskspace: normalized client-side store for Space / Folder / List / Task workspaces.
"""

__version__ = "0.1.0"
