"""ringlink core: clipboard history engine and versioned configuration store."""

__version__ = "1.2.0"
