"""Private dispatch namespace for the kernel's per-variant functions.

Rule evaluation and the well-formedness walk register one implementation
per formula or rule class. Keeping them in their own namespace stops
them from colliding with other ``multipledispatch`` users in the process.
"""

from functools import partial
from typing import Any, Dict

from multipledispatch import dispatch as _dispatch

kernel_namespace: Dict[str, Any] = {}

dispatch = partial(_dispatch, namespace=kernel_namespace)
