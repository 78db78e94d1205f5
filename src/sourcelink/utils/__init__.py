"""
sourcelink utilities package
"""

from .io_utils import read_source_file, read_source_tree, to_module_key

__all__ = ["read_source_file", "read_source_tree", "to_module_key"]
