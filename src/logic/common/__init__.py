"""Common logic shared across multiple modules.

This package contains services and utilities that are used by multiple feature modules.
"""

from logic.common.warehouse import VendorWarehouse

__all__ = ["VendorWarehouse"]
