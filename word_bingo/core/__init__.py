"""
Core modules (grid, parser, generator, layout, geometry, text fitting, PDF and print sinks).

Avoid importing heavy dependencies at package import time; import submodules directly:
- `word_bingo.core.generator`
- `word_bingo.core.layout`
- `word_bingo.core.pdf`
- `word_bingo.core.printview`
"""

__all__ = []
