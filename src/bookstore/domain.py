"""Bookstore domain: inventory, carts, orders, reviews and accounts.

A single bounded context. Every externally-triggered operation is a command
handled synchronously inside one Unit of Work, so stock decrements, cart
clearing and rating recomputation commit (or roll back) together with the
change that triggered them.
"""

from protean.domain import Domain

from bookstore.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
bookstore = Domain(name="bookstore")
