# repo2llm/__init__.py

__version__ = "0.1.0"

# Make main() from cli.py available at the package level
from .cli import main
