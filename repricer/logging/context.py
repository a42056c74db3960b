"""Scoped fields that are stamped onto every log record.

An ``adjust`` run pushes its ``run_id`` here and the per-node step pushes the
node's position in the candidate list, so any log line, including ones from
the locator or the document layer, can be traced back to the run and to the
element whose markup was being rewritten. Fields live in a ``ContextVar``,
which keeps concurrent runs in separate threads or tasks apart.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


# Active fields; replaced (never mutated) on every push
LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Get the fields currently in scope.

    Returns:
        A copy of the active context; changing it does not affect logging
    """
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Add fields to the logging context.

    New fields are merged over the current ones, so an inner scope can
    override a key (for example ``node_index``) without losing the rest.
    Use pop_log_context() to restore the previous state.

    Args:
        **kwargs: Fields to add to every record logged in this scope

    Returns:
        Token that restores the previous context

    Example:
        >>> token = push_log_context(run_id="3f2a9c1e0b7d", node_index=2)
        >>> # ... rewrite the node; every record carries both fields ...
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before a push.

    Args:
        token: Token returned from push_log_context()
    """
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field.

    Tests call this between cases so fields from one run never leak into
    the records of the next.
    """
    LogContextVar.set({})


class log_context:
    """Context manager for scoped logging fields.

    Pushes fields on entry and restores the previous context on exit, also
    when the body raises. Exceptions are never suppressed.

    Example:
        >>> with log_context(run_id="3f2a9c1e0b7d"):
        ...     with log_context(node_index=4):
        ...         logger.info("Node adjusted")  # run_id and node_index
        ...     logger.info("Run completed")  # run_id only
    """

    def __init__(self, **kwargs):
        """Remember the fields to push.

        Args:
            **kwargs: Fields to add to the logging context
        """
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        """Push the fields."""
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Restore the context from before __enter__."""
        if self.token is not None:
            pop_log_context(self.token)
        return False
