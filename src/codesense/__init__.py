"""
CodeSense - repository summaries and Q&A backed by a language model.

The model may read a few repository files through a single tool round
before it answers.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("codesense")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "__version__",
]
