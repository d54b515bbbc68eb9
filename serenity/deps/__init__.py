from .auth import auth_page_decision, require_api_session, require_page_session

__all__ = ["auth_page_decision", "require_api_session", "require_page_session"]
