# Models package
from .user import User
from .location import Location
from .device import Device
from .utilization_log import UtilizationLog
from .system_alert import SystemAlert

__all__ = ['User', 'Location', 'Device', 'UtilizationLog', 'SystemAlert']
