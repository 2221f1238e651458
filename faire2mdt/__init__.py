"""
FAIRe2MDT package

A package for converting FAIRe metabarcoding metadata to the GBIF Metabarcoding
Data Toolkit (MDT) submission format.
"""

__version__ = "1.2.0"

from .cli import main, create_parser
from .config import ConversionSettings, build_settings
from .converter import convert, transform_tables

__all__ = [
    'main',
    'create_parser',
    'ConversionSettings',
    'build_settings',
    'convert',
    'transform_tables',
]
