"""
Navigation state for paging through a binder.

The current index always stays within [0, total_pages). Requests that would
leave that range are ignored rather than raised.
"""

from dataclasses import dataclass


@dataclass
class PageNavigator:
    """
    Current-page cursor over a binder with `total_pages` views.

    Every transition returns True if the index moved, False if the request
    was out of range and ignored.
    """

    total_pages: int
    current_index: int = 0

    def __post_init__(self) -> None:
        self.total_pages = max(1, self.total_pages)
        if not 0 <= self.current_index < self.total_pages:
            self.current_index = 0

    @property
    def can_go_next(self) -> bool:
        return self.current_index < self.total_pages - 1

    @property
    def can_go_prev(self) -> bool:
        return self.current_index > 0

    def next(self) -> bool:
        if not self.can_go_next:
            return False
        self.current_index += 1
        return True

    def prev(self) -> bool:
        if not self.can_go_prev:
            return False
        self.current_index -= 1
        return True

    def go_to(self, index: int) -> bool:
        if not 0 <= index < self.total_pages:
            return False
        self.current_index = index
        return True

    def set_total_pages(self, total_pages: int) -> None:
        """Update the page count, pulling the cursor back if the binder shrank."""
        self.total_pages = max(1, total_pages)
        if self.current_index >= self.total_pages:
            self.current_index = self.total_pages - 1
