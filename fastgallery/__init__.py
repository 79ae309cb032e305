"""
fastgallery - incremental static photo and video gallery generator.
"""

__version__ = "0.3.0"
