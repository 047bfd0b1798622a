"""
Pizzeria schema definitions

Resource schemas (e.g. ``Order``) are full representations of a resource
including its identifier. Request bodies of the API carry the same
properties, where the identifier is optional since the one in the path
of the request is authoritative. The ETag of a resource revision is not
part of the resource schemas and is only added to response documents.

This package also contains the ``config`` module, but it's not
exported by default, since it's currently only used internally.
"""

from .errors import *
from .extra import *
from .orders import *
