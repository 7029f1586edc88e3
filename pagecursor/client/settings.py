from __future__ import annotations

import dataclasses
from typing import Optional


@dataclasses.dataclass
class ClientSettings:
    """ Settings for reference Clients

    This object defines the page size you get when you don't ask for one, and the largest page you can ask for.
    """
    # The page `size` you get by default, if not specified
    default_size: int = 64

    # The max number of elements per page, regardless of the size requested
    max_size: Optional[int] = None

    def get_final_size(self, size: Optional[int]) -> int:
        """ Callback that fine-tunes the page `size` by applying default and max sizes

        Used by: window planning, to decide how many rows to fetch per page.
        """
        # Apply default size
        if size is None:
            size = self.default_size

        # Apply max size
        if self.max_size:
            size = min(size, self.max_size)

        # Done
        return size
