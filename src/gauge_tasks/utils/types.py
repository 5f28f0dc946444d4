# typing
from typing import Any, Union

# recursive definition not supported by pydantic: nested values are 'Any'
JSON = Union[str, int, float, bool, None, dict[str, Any], list]
