"""Exceptions and warnings used throughout gfpperm"""
from typing import Collection

from ._text import enumeration, plural


class BadProbe(ValueError):
    "Probe with more than one non-singleton dimension"


class SizeMismatch(ValueError):
    "Distribution and probe (or two distributions) have incompatible shapes"


class SubjectCountMismatch(ValueError):
    "Conditions A and B have data for different numbers of subjects"


class DimensionMismatchError(ValueError):
    "Trial sets with mismatching channel or sample dimensions"

    @classmethod
    def from_shapes(cls, message, shapes):
        desc = '\n'.join(f'  {shape}' for shape in shapes)
        return cls(f'{message}\n{desc}')


class DataFileNotFound(FileNotFoundError):
    "Data file referenced for low-memory loading does not exist"


class FieldNotFound(KeyError):
    "Field path does not resolve in a data file (more information than KeyError)"
    def __init__(self, key: str, path: str, available: Collection):
        KeyError.__init__(self, key, path, available)

    def __str__(self):
        key, path, available = self.args
        n = len(available)
        if n:
            desc = f"{plural('field', n)} {enumeration(map(repr, available))}"
        else:
            desc = "no fields"
        return f"Field {key!r} not found in {path} ({desc} available)"


class SmallDistribution(UserWarning):
    "Reference distribution with fewer than 100 entries"


class LowPermutations(UserWarning):
    "Fewer than 100 permutations requested"
