"""
storegw - declaración del nodo store (gateway de bloques en object storage).
"""

__version__ = "1.0.0"
