"""
Application features built on top of the core and ports.
"""
