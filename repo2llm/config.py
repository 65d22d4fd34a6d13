# repo2llm/config.py

# --- Configuration ---
STAT_WORKERS = 16
PREVIEW_DIRECTORY_LIMIT = 3
PREVIEW_ITEM_LIMIT = 3
SELECTION_PREVIEW_COUNT = 3
BINARY_SAMPLE_SIZE = 1024
MAX_FILE_SIZE_MB = 10
IGNORE_FILENAME = ".repo2llmignore"
TEMP_FILE_PREFIX = "repo2llm-"

# --- Rendering ---
EMPTY_DIRECTORY_PREVIEW = "(Empty directory)"
TREE_BRANCH = "+-- "
TREE_INDENT = "|   "
FILE_RULE = "#" * 63
CONTENTS_OPEN = "<file-contents>"
CONTENTS_CLOSE = "</file-contents>"
