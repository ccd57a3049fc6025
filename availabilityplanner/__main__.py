"""
Convenience entry point: python -m availabilityplanner [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
