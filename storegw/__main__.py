"""
Punto de entrada: python -m storegw
"""

from storegw.cli.app import app

if __name__ == "__main__":
    app()
