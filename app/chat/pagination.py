"""
Pagination classes for chat API.

MessageCursorPagination pages through a conversation by message sequence.
Cursor-based pagination keeps pages stable while new messages are appended
and needs no offset calculation.

Conversation lists use the project-wide PageNumberPagination from settings,
because last_message_at is null for conversations without messages and
cannot back a cursor.
"""

from rest_framework.pagination import CursorPagination

from chat.constants import MESSAGE_CONFIG


class MessageCursorPagination(CursorPagination):
    """
    Cursor pagination for message lists.

    Orders messages oldest-first by their per-conversation sequence, which
    is unique and therefore a stable cursor position.

    Query parameters:
        cursor: Encoded cursor for position
        page_size: Number of messages (optional override)
    """

    page_size = MESSAGE_CONFIG.DEFAULT_PAGE_SIZE
    max_page_size = MESSAGE_CONFIG.MAX_PAGE_SIZE
    page_size_query_param = "page_size"
    ordering = ("sequence",)
    cursor_query_param = "cursor"
