"""
HVSC Tools Command-Line Interface
=================================

This package provides the command-line tool of HVSC Tools:

- **hvscinfo**: Show the header, STIL entry, bug notes and song lengths
  of a SID file

The tool is a Click-based CLI application; its exit codes are defined in
hvsc_tools.cli.errors.
"""

__all__ = ["hvscinfo"]
