"""Briefcase: a small persistent store for named shell variables.

Values survive across shell sessions in either a SQLite database under the
user's home directory or a plain directory of files under the temp root.
Modules do not touch the filesystem on import.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
