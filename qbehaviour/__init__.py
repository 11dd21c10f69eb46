"""
qbehaviour - question behaviours for asynchronously graded file and
free-text submissions, with certainty-based marking.
"""

__version__ = "1.0.0"
