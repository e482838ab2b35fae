"""
Cronkeeper Utilities

Logging setup shared by the scheduler modules.

Author: Cronkeeper Project
License: MIT
"""
