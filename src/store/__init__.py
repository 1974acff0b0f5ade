"""Pack storage layer.

This module moves packs between the LevelDB directory the host
application reads and the flat store file used by conversion.
"""
