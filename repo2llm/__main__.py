# repo2llm/__main__.py

from .cli import main

main()
