"""
Central configuration for ignore file processing
"""

# Name of the per-project ignore file read by the project layer
IGNORE_FILENAME = ".gitignore"

# Limits for security and performance
MAX_IGNORE_FILE_SIZE = 1024 * 1024  # 1MB
MAX_PATTERNS_PER_FILE = 10000
