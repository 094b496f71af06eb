"""
lineslice
~~~~~~~~~

Extraction of line image/ground truth pairs from transcribed page images.
"""
