"""
Kaleidoscope Command-Line Interface
===================================

This package provides the command-line tools for the Kaleidoscope
front end:

- **kscope**: parse a program (or an interactive session) and report
  each top-level construct, its AST, or its token stream

Each tool is a Click-based CLI application with help and consistent
exit codes (see kaleidoscope.cli.errors).
"""

__all__ = ["kscope"]
