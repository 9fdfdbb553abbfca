"""
ibmasm Command-Line Interface
=============================

This package provides the ``ibmasm`` command:

- **ibmasm run**: assemble and run a program, print final state
- **ibmasm layout**: run the layout pass only, print listing and memory
- **ibmasm debug**: run under the debugger with line breakpoints

Each command is part of one Click group with shared verbosity handling.
"""

__all__ = ["ibmasm"]
