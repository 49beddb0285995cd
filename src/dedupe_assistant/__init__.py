"""Selection assistant and filter engine for duplicate file scan results."""

__version__ = "0.1.0"
