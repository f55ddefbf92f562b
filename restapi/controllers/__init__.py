"""
Request controllers for the accounts API.

Controllers take decoded request data, do the work, and return a
``(data, status code, headers)`` tuple. Failures are raised as
:class:`werkzeug.exceptions.HTTPException` subclasses. Setting cookies is
left to the routes, since Flask puts cookie-setting methods on the response.
"""

from typing import Tuple

ResponseData = Tuple[dict, int, dict]
