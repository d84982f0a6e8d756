from enum import Enum


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def prefix(self) -> str:
        """mongoengine order_by prefix for this direction."""
        return "-" if self is SortDirection.DESC else "+"
