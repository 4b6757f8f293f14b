"""dofx - statistics and duplicate FITID resolution for OFX/QFX exports"""

__version__ = "0.1.0"
