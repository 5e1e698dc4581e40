"""Constants used throughout QBEView"""


# Identifier quote styles
class IdentifierQuote:
    """Identifier quoting styles, keyed by name"""
    BACKTICK = "backtick"   # MySQL / MariaDB
    ANSI = "ansi"           # PostgreSQL, SQLite, Oracle
    BRACKET = "bracket"     # SQL Server

    PAIRS = {
        BACKTICK: ("`", "`"),
        ANSI: ('"', '"'),
        BRACKET: ("[", "]"),
    }

    @classmethod
    def pair(cls, style: str):
        """Return the (open, close) characters for a quote style"""
        try:
            return cls.PAIRS[style]
        except KeyError:
            raise ValueError(f"Unknown identifier quote style: {style}") from None


# Criteria prefixes passed through verbatim by the condition builder
class CriteriaPrefix:
    """Leading tokens that mark criteria text as carrying its own operator"""
    SYMBOLS = (">", "<", "=")
    KEYWORDS = ("LIKE", "IS")


# Column key codes (SHOW COLUMNS style)
class ColumnKey:
    """Column key indicator constants"""
    PRIMARY = "PRI"
    UNIQUE = "UNI"
    MULTIPLE = "MUL"
    NONE = ""


# Tree Item Types
class ItemType:
    """Tree widget item type constants"""
    TABLE = "table"
    FIELD = "field"


# Criteria grid rows, top to bottom
class GridRow:
    """Row indices of the criteria grid"""
    FIELD = 0
    TABLE = 1
    ALIAS = 2
    SORT = 3
    SHOW = 4
    CRITERIA = 5
    OR_CRITERIA = 6

    LABELS = ["Field", "Table", "Alias", "Sort", "Show", "Criteria", "Or..."]


# Schemas never offered in the table list
SYSTEM_SCHEMAS = {'information_schema', 'mysql', 'performance_schema', 'sys', 'pg_catalog'}
