"""Vector, matrix and quaternion types, an XML document model, and a headless viewer loop."""

__version__ = "0.1.0"