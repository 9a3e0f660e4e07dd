"""Daily fantasy client for FanDuel DFS."""
import logging

__version__ = "0.1.0"

# Silent unless the application configures logging or DEBUG is set
logging.getLogger(__name__).addHandler(logging.NullHandler())
