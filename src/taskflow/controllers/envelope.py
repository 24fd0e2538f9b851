# src/taskflow/controllers/envelope.py

from __future__ import annotations

"""
Uniform response envelope shared by the controllers.

    {"success": bool, "data"?, "message"?, "error"?, "count"?, "query"?}

Only the keys that carry a value are present.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, ParamSpec

from ..core.errors import AuthorizationError, NotFoundError, TaskflowError

Response = dict[str, Any]

P = ParamSpec("P")

logger = logging.getLogger(__name__)


def ok(
    data: Any = None,
    *,
    message: str | None = None,
    count: int | None = None,
    **extra: Any,
) -> Response:
    resp: Response = {"success": True}
    if data is not None:
        resp["data"] = data
    if message is not None:
        resp["message"] = message
    if count is not None:
        resp["count"] = count
    resp.update(extra)
    return resp


def fail(error: str) -> Response:
    return {"success": False, "error": error}


def guarded(fn: Callable[P, Response]) -> Callable[P, Response]:
    """
    Turn any exception escaping a controller method into fail(...).

    Domain errors keep their message; anything unexpected is logged with a
    traceback and reported with its str().
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Response:
        try:
            return fn(*args, **kwargs)
        except (AuthorizationError, NotFoundError) as e:
            logger.info("%s denied: %s", fn.__qualname__, e)
            return fail(str(e))
        except TaskflowError as e:
            logger.warning("%s failed: %s", fn.__qualname__, e)
            return fail(str(e))
        except Exception as e:
            logger.exception("%s crashed", fn.__qualname__)
            return fail(str(e) or e.__class__.__name__)

    return wrapper
