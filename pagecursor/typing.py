from collections import abc
from typing import Any, Callable, Optional, TYPE_CHECKING


if TYPE_CHECKING:
    from pagecursor.query.expressions import Expression


# Annotation for page elements: whatever the remote engine returns
Element = Any

# Annotation for cursor tokens: opaque values that mark a position in the set
CursorToken = str

# Annotation for a cursor token that may be missing: `None` means "no page in that direction"
OptionalCursorToken = Optional[CursorToken]

# Annotation for pagination parameters: { name => value }
PaginationParams = abc.Mapping[str, Any]

# A transform in the remote query language: receives the paginate query, returns a new query
ServerMap = Callable[['Expression'], 'Expression']

# A local transform applied to every element of a loaded page
LocalMap = Callable[[Element], Element]
