"""
VMTB core - case intake workflow and tumor board meeting scheduling
"""

__version__ = "1.0.0"
__author__ = "VMTB Team"
__description__ = "Case intake state machine and MTB meeting recurrence engine"

__all__ = [
    "__version__",
    "__author__",
    "__description__",
]
