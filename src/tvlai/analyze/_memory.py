"""Byte-granular abstract memory.

Maps 64-bit addresses to 8-bit ``BitVector`` values.  An address that was
never written reads as an all-Unknown byte, so "absent" and "definitely
unknown" are the same thing.

Cloning is copy-on-write: a clone shares its parent's dict until either
side writes.  Stored values are immutable, so sharing them is safe.
"""

from __future__ import annotations

from collections.abc import Iterator

from tvlai.domain import BitVector, BitVectorError

ADDRESS_MASK = (1 << 64) - 1
BYTE_BITS = 8


class AbstractMemory:
    def __init__(self, big_endian: bool = False) -> None:
        self.big_endian = big_endian
        self._bytes: dict[int, BitVector] = {}
        self._shared = False

    # -----------------------------------------------------------------------
    # Single bytes
    # -----------------------------------------------------------------------

    def store(self, address: int, value: BitVector) -> None:
        if value.width != BYTE_BITS:
            raise BitVectorError(f"Memory cells hold {BYTE_BITS} bits, got {value.width}")
        self._own()
        self._bytes[address & ADDRESS_MASK] = value

    def load(self, address: int) -> BitVector:
        value = self._bytes.get(address & ADDRESS_MASK)
        return value if value is not None else BitVector.unknown(BYTE_BITS)

    # -----------------------------------------------------------------------
    # Multi-byte values
    # -----------------------------------------------------------------------

    def _chunk_addresses(self, address: int, count: int) -> list[int]:
        """Address of each chunk, least significant chunk first."""
        offsets = range(count - 1, -1, -1) if self.big_endian else range(count)
        return [(address + i) & ADDRESS_MASK for i in offsets]

    def store_wide(self, address: int, value: BitVector) -> None:
        if value.width % BYTE_BITS:
            raise BitVectorError(f"Width {value.width} is not a whole number of bytes")
        count = value.width // BYTE_BITS
        self._own()
        for i, addr in enumerate(self._chunk_addresses(address, count)):
            self._bytes[addr] = value.slice(i * BYTE_BITS, (i + 1) * BYTE_BITS)

    def load_wide(self, address: int, bits: int) -> BitVector:
        if bits % BYTE_BITS:
            raise BitVectorError(f"Width {bits} is not a whole number of bytes")
        count = bits // BYTE_BITS
        return BitVector.concat(
            self.load(addr) for addr in self._chunk_addresses(address, count)
        )

    # -----------------------------------------------------------------------
    # Whole-memory operations
    # -----------------------------------------------------------------------

    def invalidate(self) -> None:
        """Forget every byte: the whole memory becomes Unknown."""
        self._bytes = {}
        self._shared = False

    def clone(self) -> AbstractMemory:
        other = AbstractMemory.__new__(AbstractMemory)
        other.big_endian = self.big_endian
        other._bytes = self._bytes
        other._shared = True
        self._shared = True
        return other

    def _own(self) -> None:
        if self._shared:
            self._bytes = dict(self._bytes)
            self._shared = False

    # -----------------------------------------------------------------------
    # Inspection
    # -----------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self._bytes

    def addresses(self) -> list[int]:
        """Written addresses in ascending order."""
        return sorted(self._bytes)

    def items(self) -> Iterator[tuple[int, BitVector]]:
        for address in self.addresses():
            yield address, self._bytes[address]

    def __len__(self) -> int:
        return len(self._bytes)

    def __contains__(self, address: int) -> bool:
        return (address & ADDRESS_MASK) in self._bytes

    def __repr__(self) -> str:
        order = "big" if self.big_endian else "little"
        return f"AbstractMemory({len(self)} byte(s), {order}-endian)"
