#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## lut.py
##
"""
    Look-up table of previously published optimal Golomb rulers.

    The table is built once at import time and is read-only afterwards.
    It performs no search: it is used to seed the target length of a search
    (see the `--best` option of the command line interface) and to classify a
    found ruler as optimal or merely valid.

    =================
    List of functions
    =================
    .. autosummary::
        :nosignatures:

        optimal_ruler
        optimal_length
        optimal_ruler_by_length
        is_optimal
        max_known_marks
        all_optimal_rulers
"""
from types import MappingProxyType

from .ruler import Ruler

_OPTIMAL_POSITIONS = {
    2: [0, 1],
    3: [0, 1, 3],
    4: [0, 1, 4, 6],
    5: [0, 1, 4, 9, 11],
    6: [0, 1, 4, 10, 12, 17],
    7: [0, 1, 4, 10, 18, 23, 25],
    8: [0, 1, 4, 9, 15, 22, 32, 34],
    9: [0, 1, 5, 12, 25, 27, 35, 41, 44],
    10: [0, 1, 6, 10, 23, 26, 34, 41, 53, 55],
    11: [0, 1, 4, 13, 28, 33, 47, 54, 64, 70, 72],
    12: [0, 2, 6, 24, 29, 40, 43, 55, 68, 75, 76, 85],
    13: [0, 2, 5, 25, 37, 43, 59, 70, 85, 89, 98, 99, 106],
    14: [0, 4, 6, 20, 35, 52, 59, 77, 78, 86, 89, 99, 122, 127],
    15: [0, 4, 20, 30, 57, 59, 62, 76, 100, 111, 123, 136, 144, 145, 151],
    16: [0, 1, 4, 11, 26, 32, 56, 68, 76, 115, 117, 134, 150, 163, 168, 177],
    17: [0, 5, 7, 17, 52, 56, 67, 80, 81, 100, 122, 138, 159, 165, 168, 191, 199],
    18: [0, 2, 10, 22, 53, 56, 82, 83, 89, 98, 130, 148, 153, 167, 188, 192, 205, 216],
    19: [0, 1, 6, 25, 32, 72, 100, 108, 120, 130, 153, 169, 187, 190, 204, 231, 233, 242, 246],
    20: [0, 1, 8, 11, 68, 77, 94, 116, 121, 156, 158, 179, 194, 208, 212, 228, 240, 253, 259, 283],
    21: [0, 2, 24, 56, 77, 82, 83, 95, 129, 144, 179, 186, 195, 255, 265, 285, 293, 296, 310, 329,
         333],
    22: [0, 1, 9, 14, 43, 70, 106, 122, 124, 128, 159, 179, 204, 223, 253, 263, 270, 291, 330, 341,
         353, 356],
    23: [0, 3, 7, 17, 61, 66, 91, 99, 114, 159, 171, 199, 200, 226, 235, 246, 277, 316, 329, 348,
         350, 366, 372],
    24: [0, 9, 33, 37, 38, 97, 122, 129, 140, 142, 152, 191, 205, 208, 252, 278, 286, 326, 332, 353,
         368, 384, 403, 425],
    25: [0, 12, 29, 39, 72, 91, 146, 157, 160, 161, 166, 191, 207, 214, 258, 290, 316, 354, 372, 394,
         396, 431, 459, 467, 480],
    26: [0, 1, 33, 83, 104, 110, 124, 163, 185, 200, 203, 249, 251, 258, 314, 318, 343, 356, 386, 430,
         440, 456, 464, 475, 487, 492],
    27: [0, 3, 15, 41, 66, 95, 97, 106, 142, 152, 220, 221, 225, 242, 295, 330, 338, 354, 382, 388,
         402, 415, 486, 504, 523, 546, 553],
    28: [0, 3, 15, 41, 66, 95, 97, 106, 142, 152, 220, 221, 225, 242, 295, 330, 338, 354, 382, 388,
         402, 415, 486, 504, 523, 546, 553, 585],
}

# marks -> Ruler, never mutated after import
OPTIMAL_RULERS = MappingProxyType({marks: Ruler.of(pos) for marks, pos in _OPTIMAL_POSITIONS.items()})


def optimal_ruler(marks):
    """
        The known optimal ruler with `marks` marks, or None if unknown
    """
    return OPTIMAL_RULERS.get(marks)


def optimal_length(marks):
    """
        The length of the known optimal ruler with `marks` marks, or None if unknown.

        Absence is a normal outcome, the caller then has to supply its own bound.
    """
    ruler = OPTIMAL_RULERS.get(marks)
    return ruler.length if ruler is not None else None


def optimal_ruler_by_length(length):
    """
        The known optimal ruler of the given length, or None if no table entry has that length
    """
    for ruler in OPTIMAL_RULERS.values():
        if ruler.length == length:
            return ruler
    return None


def is_optimal(ruler):
    """
        Whether `ruler` is as short as the known optimal ruler with the same number of marks.

        Only compares lengths, validity of `ruler` is not checked here.
        Returns False when the table has no entry for that number of marks.
    """
    optimal = OPTIMAL_RULERS.get(ruler.marks)
    return optimal is not None and ruler.length == optimal.length


def max_known_marks():
    return max(OPTIMAL_RULERS.keys())


def all_optimal_rulers():
    """
        Read-only view of the whole table, `{marks: Ruler}`
    """
    return OPTIMAL_RULERS
