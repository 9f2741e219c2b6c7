"""
Database of field names according to different naming conventions

You will likely not need to access this variable directly,
and instead will use one of:

- [convert_field_name][casesummary.renaming.].
- [rename_columns][casesummary.renaming.].
"""

from casesummary.databases.field_names import FIELD_NAMES

__all__ = ["FIELD_NAMES"]
