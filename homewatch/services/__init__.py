"""Service layer modules."""

from homewatch.services.bridge import BridgeError, HueProxyClient, get_full_config
from homewatch.services.extractor import extract_light_readings, extract_sensor_readings
from homewatch.services.grouping import group_sensors
from homewatch.services.ingest_service import ingest_bridge_config
from homewatch.services.readings_service import (
    delete_old_readings,
    get_all_active_readings,
    get_capability_stats,
    get_readings,
    save_batch,
    save_reading,
    save_snapshot,
    scan_active_readings,
)
from homewatch.services.status_service import get_dashboard

__all__ = [
    "BridgeError",
    "HueProxyClient",
    "get_full_config",
    "extract_sensor_readings",
    "extract_light_readings",
    "group_sensors",
    "ingest_bridge_config",
    "save_reading",
    "save_snapshot",
    "save_batch",
    "get_readings",
    "scan_active_readings",
    "get_all_active_readings",
    "get_capability_stats",
    "delete_old_readings",
    "get_dashboard",
]
