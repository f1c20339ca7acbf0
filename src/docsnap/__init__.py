"""docsnap -- Motion-triggered document capture and text extraction.

This package watches a live camera feed, detects the moment a new
document is placed in view by comparing successive frames, and runs a
single text extraction for each such event before re-arming.
"""

__version__ = "0.1.0"
