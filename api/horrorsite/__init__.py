"""
Backend del sitio de historias de terror.
"""
__version__ = "1.0.0"
