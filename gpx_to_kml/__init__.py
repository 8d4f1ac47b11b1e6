"""GPX to KML batch converter.

Converts a directory of GPX track logs (one track per file) into KML
documents with a fixed line style, using a bounded worker pool so that
large activity-history exports can be processed unattended.
"""

__version__ = "0.1.0"
