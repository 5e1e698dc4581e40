"""
QBEView Tests Package

Puts the project root on the path so tests can import qbeview and
tests.conftest without an installed package.
"""
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))
