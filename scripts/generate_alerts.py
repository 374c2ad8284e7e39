#!/usr/bin/env python3
"""
Run every alert rule once and store the results.

Intended for an external scheduler, e.g. a daily cron entry:
    0 6 * * * cd /opt/asset-tracker && python scripts/generate_alerts.py
"""

import json
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import structlog

from asset_tracker.analytics.rules import AlertThresholds
from asset_tracker.core.config import settings
from asset_tracker.core.exceptions import DataAccessError, InvalidActionError
from asset_tracker.core.log_config import configure_logging
from asset_tracker.database.connection import SessionLocal
from asset_tracker.repositories.utilization_repository import UtilizationRepository
from asset_tracker.services.alert_service import AlertService

logger = structlog.get_logger(__name__)

def main(action: str = "generate-alerts") -> int:
    configure_logging()
    db = SessionLocal()
    try:
        service = AlertService(
            UtilizationRepository(db),
            thresholds=AlertThresholds.from_settings(settings),
            deduplicate=settings.deduplicate_alerts,
        )
        result = service.run(action)
    except DataAccessError as e:
        logger.error("Alert generation failed", action=action, error=str(e))
        return 1
    except InvalidActionError as e:
        logger.error("Unknown alert action", action=e.action)
        return 2
    finally:
        db.close()
    
    print(json.dumps(result))
    return 0

if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
