"""QBEView - Visual Query-By-Example SQL builder"""

__version__ = "1.0.0"
