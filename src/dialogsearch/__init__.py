"""dialogsearch: full-text search that tells dialogue from narration.

Text inside double quotes is dialogue. Analysis tags every indexed word with
a one-byte payload (1 inside dialogue, 0 outside) and the dialogue-aware
similarity scores occurrences outside dialogue as zero.
"""

__version__ = "0.1.0"
