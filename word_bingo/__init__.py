"""Word Bingo: randomized word bingo cards as PDF and print-ready HTML."""

__version__ = "0.1.0"
