from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar, Any, cast
from flask import g

from utils.access import current_access

F = TypeVar("F", bound=Callable[..., Any])


def admin_required(func: F) -> F:
    """Decorator that requires a signed-in operator.

    - Builds the :class:`~utils.access.AccessContext` from the session and
      exposes it as ``g.access`` for the view to hand to the data layer.
    - Without a session, :class:`~utils.access.NotAuthenticated` propagates
      to the app's error handler (401 JSON).
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.access = current_access().ensure_operator()
        return func(*args, **kwargs)

    return cast(F, wrapper)
