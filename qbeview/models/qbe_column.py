"""
QBE Column Model - One row of the visual query grid
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SortOrder(Enum):
    """Sort direction of a grid column"""
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def coerce(cls, value) -> Optional['SortOrder']:
        """Accept a SortOrder, its string value, or None/empty for no sort"""
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Invalid sort order: {value!r}") from None


def _new_column_id() -> str:
    return uuid.uuid4().hex


@dataclass
class QBEColumn:
    """A column placed in the QBE grid with its display, sort and filter settings"""
    table: str
    field: str
    alias: str = ""
    show: bool = True
    sort: Optional[SortOrder] = None
    criteria: str = ""
    or_criteria: str = ""
    id: str = field(default_factory=_new_column_id)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'table': self.table,
            'field': self.field,
            'alias': self.alias,
            'show': self.show,
            'sort': self.sort.value if self.sort else None,
            'criteria': self.criteria,
            'or_criteria': self.or_criteria
        }

    @staticmethod
    def from_dict(data: dict) -> 'QBEColumn':
        kwargs = dict(
            table=data['table'],
            field=data['field'],
            alias=data.get('alias', ''),
            show=data.get('show', True),
            sort=SortOrder.coerce(data.get('sort')),
            criteria=data.get('criteria', ''),
            or_criteria=data.get('or_criteria', '')
        )
        if data.get('id'):
            kwargs['id'] = data['id']
        return QBEColumn(**kwargs)


@dataclass
class ColumnInfo:
    """Column metadata returned by schema discovery"""
    field: str
    type: str = ""
    nullable: bool = True
    key: str = ""
    default: Optional[str] = None
    extra: str = ""
