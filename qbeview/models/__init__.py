"""
Models package for QBEView data structures
"""

from qbeview.models.qbe_column import QBEColumn, SortOrder, ColumnInfo

__all__ = ['QBEColumn', 'SortOrder', 'ColumnInfo']
