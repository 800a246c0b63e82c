# ABOUTME: Package initialization for the mailthread conversation-threading engine
# ABOUTME: Defines version and sets up package-level logging configuration
"""mailthread - Conversation threading for mail list stores"""

__version__ = "0.1.0"

# Set up logging for the package
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
