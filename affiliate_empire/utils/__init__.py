# Utils module

from affiliate_empire.utils.log_config import configure_logging

__all__ = ["configure_logging"]
