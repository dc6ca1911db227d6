"""
Gateway Module
==============

Device gateway access for the modeler's initial backfill.

Components:
    - DeviceGateway: Protocol consumed by the modeler
    - GatewayClient: HTTP implementation (requests)
"""

from wifi_rrm.gateway.client import DeviceGateway, GatewayClient, GatewayError


__all__ = [
    "DeviceGateway",
    "GatewayClient",
    "GatewayError",
]
