"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants for the GPX and KML formats
- exceptions: Conversion error taxonomy
"""
