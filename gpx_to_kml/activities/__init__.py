"""Per-file conversion stages.

parse_gpx -> resolve output path -> write_kml, composed by convert_file.
"""
