"""
Admin User Repository - Data Access Layer for dashboard users
"""
from typing import Optional

from pydantic import BaseModel

from app.core.database import get_db_connection_dict


class AdminUserRecord(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str = "admin"
    is_active: bool = True
    password_hash: str


class AdminUserRepository:
    """Repository for admin_users"""

    def find_by_email(self, email: str) -> Optional[AdminUserRecord]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, email, name, role, is_active, password_hash
                FROM admin_users
                WHERE LOWER(email) = LOWER(%s)
            """, (email,))

            row = cursor.fetchone()
            return AdminUserRecord(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, email: str, password_hash: str, name: Optional[str] = None, role: str = "admin") -> AdminUserRecord:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO admin_users (email, password_hash, name, role)
                VALUES (%s, %s, %s, %s)
                RETURNING id, email, name, role, is_active, password_hash
            """, (email.strip().lower(), password_hash, name, role))

            row = cursor.fetchone()
            conn.commit()
            return AdminUserRecord(**row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()
