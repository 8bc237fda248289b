"""Read-only directory of a condominium's blocks and apartments."""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Block:
    id: int
    name: str


@dataclass(frozen=True)
class Apartment:
    id: int
    block_id: int
    number: str


def normalize_label(label: str | None) -> str:
    """Labels compare case-insensitively and ignore surrounding spaces."""
    return (label or "").strip().upper()


class UnitDirectory:
    """Blocks and apartments of one condominium, indexed for exact lookup.

    Apartment numbers are only unique within a block, so apartments are
    keyed by (block id, number). When two blocks share a normalized name the
    first one loaded wins.
    """

    def __init__(self, blocks: Iterable[Block] = (), apartments: Iterable[Apartment] = ()):
        self.blocks: tuple[Block, ...] = tuple(blocks)
        self.apartments: tuple[Apartment, ...] = tuple(apartments)

        self._blocks_by_name: dict[str, Block] = {}
        for block in self.blocks:
            self._blocks_by_name.setdefault(normalize_label(block.name), block)

        self._apartments_by_key: dict[tuple[int, str], Apartment] = {}
        for apartment in self.apartments:
            key = (apartment.block_id, normalize_label(apartment.number))
            self._apartments_by_key.setdefault(key, apartment)

        self._apartments_by_id = {apartment.id: apartment for apartment in self.apartments}

    @property
    def apartment_ids(self) -> list[int]:
        return [apartment.id for apartment in self.apartments]

    def find_block(self, block_label: str) -> Block | None:
        return self._blocks_by_name.get(normalize_label(block_label))

    def find_apartment(self, block_id: int, apartment_label: str) -> Apartment | None:
        return self._apartments_by_key.get((block_id, normalize_label(apartment_label)))

    def get_apartment(self, apartment_id: int) -> Apartment | None:
        return self._apartments_by_id.get(apartment_id)

    def first_unit(self) -> tuple[Block, Apartment] | None:
        """First block that has apartments, with its first apartment."""
        for block in self.blocks:
            for apartment in self.apartments:
                if apartment.block_id == block.id:
                    return block, apartment
        return None

    def __len__(self) -> int:
        return len(self.apartments)


def resolve_apartment(
    block_label: str, apartment_label: str, directory: UnitDirectory
) -> int | None:
    """Map a (block, apartment) label pair to an apartment id.

    Exact match only, after trimming and uppercasing both labels.
    """
    block = directory.find_block(block_label)
    if block is None:
        return None
    apartment = directory.find_apartment(block.id, apartment_label)
    return apartment.id if apartment else None
