"""tocedit - edit the bookmarks stored in a PDF's metadata."""

__version__ = "0.1.0"
