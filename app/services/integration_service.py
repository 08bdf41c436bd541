"""
Integration Settings Service
Dashboard configuration of webhooks, Chatwoot, Mercado Pago and store info
"""
import logging
from datetime import datetime
from typing import Optional

from app.core.config import settings as app_settings
from app.domain.integration import (
    IntegrationSettings,
    IntegrationSettingsUpdate,
    StoreStatus,
    compute_store_status,
)
from app.repositories.integration_repository import IntegrationRepository

logger = logging.getLogger(__name__)


class IntegrationService:
    def __init__(self):
        self.integration_repo = IntegrationRepository()

    def get_settings(self) -> Optional[IntegrationSettings]:
        """The settings row, or None when the store was never configured"""
        return self.integration_repo.get()

    def update_settings(self, data: IntegrationSettingsUpdate) -> IntegrationSettings:
        """Update the settings row (created on first save)"""
        fields = data.model_dump(exclude_unset=True)
        saved = self.integration_repo.save(fields)
        logger.info(f"Integration settings saved ({', '.join(sorted(fields)) or 'no changes'})")
        return saved

    def get_mp_access_token(self) -> Optional[str]:
        """Mercado Pago token from the dashboard, falling back to MP_ACCESS_TOKEN"""
        try:
            stored = self.integration_repo.get()
        except Exception as e:
            logger.error(f"Could not load integration settings: {e}")
            stored = None

        if stored and stored.mp_access_token:
            return stored.mp_access_token
        return app_settings.MP_ACCESS_TOKEN or None

    def get_store_status(self, now: Optional[datetime] = None) -> StoreStatus:
        stored = self.integration_repo.get()
        return compute_store_status(
            stored.store_hours if stored else None,
            now=now,
            timezone_name=app_settings.STORE_TIMEZONE,
        )
