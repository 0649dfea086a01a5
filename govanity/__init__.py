"""govanity - static go-import pages for vanity import paths."""

__version__ = "0.1.0"
