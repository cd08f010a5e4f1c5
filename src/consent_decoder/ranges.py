"""
consent_decoder.ranges

Vendor range entries used by range-encoded consent strings.

Classes:
    - RangeEntry: a single vendor ID or an inclusive [min, max] ID interval

Functions:
    - find_vendor_in_ranges: locate a vendor ID in an encoded range-entry list
"""

from typing import Sequence

from common.models import RangeEntryModel


class RangeEntry:
    """A single vendor ID or an inclusive vendor ID interval."""

    __slots__ = ("min_vendor_id", "max_vendor_id")

    def __init__(self, vendor_id: int):
        self.min_vendor_id = vendor_id
        self.max_vendor_id = vendor_id

    @classmethod
    def from_range(cls, start_vendor_id: int, end_vendor_id: int) -> "RangeEntry":
        entry = cls(start_vendor_id)
        entry.max_vendor_id = end_vendor_id
        return entry

    @property
    def is_range(self) -> bool:
        return self.min_vendor_id != self.max_vendor_id

    def contains(self, vendor_id: int) -> bool:
        return self.min_vendor_id <= vendor_id <= self.max_vendor_id

    def exceeds(self, vendor_id: int) -> bool:
        """True when ``vendor_id`` lies above this entry's upper bound."""
        return vendor_id > self.max_vendor_id

    def to_model(self) -> RangeEntryModel:
        return RangeEntryModel(min_vendor_id=self.min_vendor_id, max_vendor_id=self.max_vendor_id)

    def __eq__(self, other):
        if not isinstance(other, RangeEntry):
            return NotImplemented
        return (self.min_vendor_id, self.max_vendor_id) == (
            other.min_vendor_id,
            other.max_vendor_id,
        )

    def __hash__(self):
        return hash((self.min_vendor_id, self.max_vendor_id))

    def __repr__(self):
        if self.is_range:
            return f"RangeEntry.from_range({self.min_vendor_id}, {self.max_vendor_id})"
        return f"RangeEntry({self.min_vendor_id})"


def find_vendor_in_ranges(entries: Sequence[RangeEntry], vendor_id: int) -> bool:
    """
    Probe ``entries`` for ``vendor_id`` the way existing TCF v1 decoders do.

    This is not a bisection: there is no lower/upper bound, the probe stops as
    soon as it reaches either end of the list, and it halves the index whenever
    the ID is not above the current entry. Some present IDs are therefore
    reported as absent. Those results are relied upon by existing consumers and
    are kept as they are.

    The next index depends only on the current one, so landing on an index a
    second time means the probe would cycle forever; that is reported as absent.
    """
    limit = len(entries)
    if limit == 0:
        return False

    index = limit // 2
    visited = set()
    while 0 <= index < limit and index not in visited:
        visited.add(index)
        entry = entries[index]
        if entry.contains(vendor_id):
            return True
        if index == 0 or index == limit - 1:
            return False
        if entry.exceeds(vendor_id):
            index = index + (limit - index) // 2
        else:
            index = index // 2
    return False
