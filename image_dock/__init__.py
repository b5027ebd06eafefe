"""Image Dock: upload images to object storage and catalog them."""

__version__ = "0.1.0"
