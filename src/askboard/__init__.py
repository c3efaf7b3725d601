"""askboard: community question board with consistent upvotes and pinned comments."""

__version__ = "0.1.0"
