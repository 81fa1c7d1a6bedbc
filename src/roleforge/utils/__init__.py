"""
roleforge Utils Module

- logger: Logging setup and configuration
- fs: File copy helpers used while assembling build contexts

Usage:
    from roleforge.utils import setup_logger, copy_tree
"""

from .logger import setup_logger, parse_module_levels
from .fs import copy_file, copy_tree, make_dirs, write_text, reset_dir

__all__ = [
    'setup_logger',
    'parse_module_levels',
    'copy_file',
    'copy_tree',
    'make_dirs',
    'write_text',
    'reset_dir',
]
