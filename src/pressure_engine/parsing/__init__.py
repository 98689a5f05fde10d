"""
Parsing Module
==============

Text recording -> frame matrices.
"""

from pressure_engine.parsing.frame_parser import (
    parse_cell,
    parse_file,
    parse_lines,
    read_lines,
)

__all__ = ["parse_cell", "parse_file", "parse_lines", "read_lines"]
