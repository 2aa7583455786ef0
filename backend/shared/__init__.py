"""
Shared module for common utilities used by the orders API.

STRUCTURE:
- shared.security: Token verification and role guards
  - auth.py: JWT verification, current_user_context, require_roles

- shared.infrastructure: Database and request tracing
  - db.py: SQLAlchemy sessions, safe_commit(), atomic()
  - correlation.py: X-Request-ID middleware and log filter

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Roles, OrderStatus, TableStatus, transition table

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - schemas.py: Pydantic request/response schemas

IMPORT EXAMPLES:
    from shared.security.auth import current_user_context, require_roles
    from shared.infrastructure.db import get_db, atomic
    from shared.config.settings import settings
    from shared.config.constants import OrderStatus, STAFF_ROLES
    from shared.utils.exceptions import NotFoundError, ForbiddenError
"""
