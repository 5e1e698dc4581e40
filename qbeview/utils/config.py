"""Configuration management for QBEView"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from qbeview.utils.constants import IdentifierQuote


@dataclass
class Config:
    """Application configuration"""

    app_name: str = "QBEView"
    organization_name: str = "QBEView"
    version: str = "1.0.0"

    # Window settings
    window_width: int = 1400
    window_height: int = 850
    window_min_width: int = 1000
    window_min_height: int = 600

    # Panel settings
    tables_panel_width: int = 300

    # Database
    database_url: Optional[str] = None
    default_database: Optional[str] = None
    identifier_quote: str = IdentifierQuote.BACKTICK

    # Logging
    log_dir: Optional[str] = None
    log_level: str = "INFO"


def load_config(home: Optional[Path] = None) -> Config:
    """
    Load configuration from defaults and the environment

    Recognized variables: QBEVIEW_DATABASE_URL, QBEVIEW_DATABASE,
    QBEVIEW_LOG_LEVEL.
    """
    config = Config()

    app_dir = (home or Path.home()) / '.qbeview'
    app_dir.mkdir(parents=True, exist_ok=True)

    config.log_dir = str(app_dir / 'logs')
    Path(config.log_dir).mkdir(exist_ok=True)

    config.database_url = os.environ.get('QBEVIEW_DATABASE_URL', config.database_url)
    config.default_database = os.environ.get('QBEVIEW_DATABASE', config.default_database)
    config.log_level = os.environ.get('QBEVIEW_LOG_LEVEL', config.log_level)

    return config
