"""
Current site locale context.

Holds the ambient locale used by translatable processors when no locale
was chosen explicitly. Propagates across async boundaries using contextvars.

Dependencies: contextvars
System role: Request-scoped locale tracking
"""

from contextvars import ContextVar

current_locale_ctx: ContextVar[str | None] = ContextVar("current_locale", default=None)


def set_current_locale(locale: str | None) -> None:
    """
    Set the site locale for the current context.

    Args:
        locale: Locale code, or None to fall back to the configured default
    """
    current_locale_ctx.set(locale)


def get_current_locale(default: str) -> str:
    """
    Get the site locale for the current context.

    Args:
        default: Locale returned when none is set

    Returns:
        str: Active site locale
    """
    return current_locale_ctx.get() or default


def clear_current_locale() -> None:
    """Clear the site locale from context."""
    current_locale_ctx.set(None)
