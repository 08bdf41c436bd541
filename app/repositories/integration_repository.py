"""
Integration Settings Repository

The integration_settings table holds a single row.
"""
from typing import Any, Dict, Optional

from app.core.database import get_db_connection_dict
from app.domain.integration import IntegrationSettings

SETTINGS_COLUMNS = """
    id, webhook_order_created, webhook_abandoned_cart,
    status_order_created, status_abandoned_cart, auth_token,
    mp_access_token, mp_public_key,
    chatwoot_url, chatwoot_account_id, chatwoot_token, chatwoot_inbox_id,
    store_address, store_hours, created_at, updated_at
"""

UPDATABLE_COLUMNS = {
    'webhook_order_created', 'webhook_abandoned_cart',
    'status_order_created', 'status_abandoned_cart', 'auth_token',
    'mp_access_token', 'mp_public_key',
    'chatwoot_url', 'chatwoot_account_id', 'chatwoot_token', 'chatwoot_inbox_id',
    'store_address', 'store_hours',
}


class IntegrationRepository:
    """Repository for the integration settings row"""

    def get(self) -> Optional[IntegrationSettings]:
        """
        Load the settings row

        Returns:
            IntegrationSettings or None if the store was never configured
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {SETTINGS_COLUMNS}
                FROM integration_settings
                ORDER BY id
                LIMIT 1
            """)

            row = cursor.fetchone()
            return IntegrationSettings(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def save(self, fields: Dict[str, Any]) -> IntegrationSettings:
        """
        Update the existing row or create it when missing

        Args:
            fields: Columns to write (unknown keys are ignored)

        Returns:
            The stored settings
        """
        updates = {k: v for k, v in fields.items() if k in UPDATABLE_COLUMNS}

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT id FROM integration_settings ORDER BY id LIMIT 1")
            existing = cursor.fetchone()

            if existing and updates:
                set_clause = ", ".join(f"{column} = %s" for column in updates)
                cursor.execute(f"""
                    UPDATE integration_settings
                    SET {set_clause}, updated_at = NOW()
                    WHERE id = %s
                    RETURNING {SETTINGS_COLUMNS}
                """, list(updates.values()) + [existing['id']])
            elif existing:
                cursor.execute(f"""
                    SELECT {SETTINGS_COLUMNS}
                    FROM integration_settings
                    WHERE id = %s
                """, (existing['id'],))
            elif updates:
                columns = ", ".join(updates)
                placeholders = ", ".join(["%s"] * len(updates))
                cursor.execute(f"""
                    INSERT INTO integration_settings ({columns})
                    VALUES ({placeholders})
                    RETURNING {SETTINGS_COLUMNS}
                """, list(updates.values()))
            else:
                cursor.execute(f"""
                    INSERT INTO integration_settings DEFAULT VALUES
                    RETURNING {SETTINGS_COLUMNS}
                """)

            row = cursor.fetchone()
            conn.commit()
            return IntegrationSettings(**row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
