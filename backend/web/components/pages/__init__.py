from .status_page import AccountStatusPage, MessagePage

__all__ = ["AccountStatusPage", "MessagePage"]
