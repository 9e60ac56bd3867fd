"""Default tool catalog assembled at startup."""

from infrastructure.call_client import OutboundCallClient
from logic.common.warehouse import VendorWarehouse
from logic.tools.registry import ToolRegistry
from logic.tools.utilities import build_utility_tools
from logic.tools.vendors import build_vendor_tools


def build_default_registry(
    warehouse: VendorWarehouse, call_client: OutboundCallClient
) -> ToolRegistry:
    """Register every tool the assistant can use."""
    return ToolRegistry(
        [
            *build_vendor_tools(warehouse, call_client),
            *build_utility_tools(),
        ]
    )
