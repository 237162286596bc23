"""Warehouse storage hierarchy with lazy loading, staged persistence and tray selection."""
