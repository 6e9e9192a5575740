"""Two-dimensional agent simulation: shapes, objects, agents, commands, ticks and on-disk projects."""

__version__ = "0.1.0"