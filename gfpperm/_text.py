"""Text generation helpers"""
from typing import Iterable


def enumeration(items: Iterable[object], link: str = 'and'):
    "['a', 'b', 'c'] -> 'a, b and c'"
    items = list(map(str, items))
    if len(items) >= 2:
        return f"{', '.join(items[:-1])} {link} {items[-1]}"
    elif len(items) == 1:
        return items[0]
    else:
        raise ValueError(f"items={items!r}")


def n_of(
        n: int,
        of: str,
        plural_for_0: bool = False,
):
    "n_of(3, 'epoch') -> '3 epochs'"
    if n == 0:
        return f"no {plural(of, not plural_for_0)}"
    return f"{n} {plural(of, n)}"


PLURALS = {
    'is': 'are',
}


def plural(singular, n):
    "plural('house', 2) -> 'houses'"
    if n == 1:
        return singular
    elif singular in PLURALS:
        return PLURALS[singular]
    elif singular[-1] == 'y' and singular[-2] != 'e':
        return singular[:-1] + 'ies'
    else:
        return singular + 's'
