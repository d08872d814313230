"""svn-diff-commit: publish a directory tree to Subversion as one commit."""

__version__ = "1.0.0"
