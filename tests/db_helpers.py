"""Shared helpers for repository tests (no live database)"""
from unittest.mock import MagicMock


def mock_db_connection(mock_get_conn):
    """
    Wire a patched get_db_connection_dict to a MagicMock connection

    Returns:
        (conn, cursor) mocks
    """
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_get_conn.return_value = mock_conn
    mock_conn.cursor.return_value = mock_cursor
    return mock_conn, mock_cursor
