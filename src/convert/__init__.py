"""Pack conversion layer.

This module converts between flat pack stores and editable file trees.
It owns folder resolution, migrations, and embedded document handling.
"""
