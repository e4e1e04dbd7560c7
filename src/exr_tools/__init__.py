"""
exr-tools - Inspection and compression analysis for OpenEXR images

Provides:
- Per-layer compression benchmarking (size and encoding time)
- A recommended compression for every layer
- Structural metadata dumps
"""

__version__ = "0.1.0"
__package_name__ = "exr-tools"
