#    numerotator - IMGT Numbering of Antibody Variable Regions
#    Copyright (C) 2026 The numerotator developers
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the BSD 3-Clause License.
#
#    You should have received a copy of the BSD 3-Clause Licence
#    along with this program.  If not, see <https://opensource.org/license/bsd-3-clause/>.

'''
Module containing functions to number the regions of an aligned V-region with the IMGT scheme.

Mapping according to the IMGT Scientific chart
https://www.imgt.org/IMGTScientificChart/Numbering/IMGTIGVLsuperfamily.html

---------------------------------------------------------------------------------------------------------------------
The regions are numbered in two different ways:

  - CDRs are numbered by their length alone. For every length the IMGT chart defines which positions are occupied.
    Positions are removed from the centre of the loop outwards as the loop gets shorter, the outermost positions are
    kept longest. These tables are written out below exactly as they are published.

  - CDR3s longer than the 13 IMGT positions get insertions between 111 and 112:

        105 106 107 108 109 110 111 111.0 111.1 ... 112.1 112.0 112 113 114 115 116 117

    The 111 insertions count up, the 112 insertions count down, meeting in the middle.

  - Frameworks are numbered through the alignment. Each query residue matched (or substituted) to a framework
    residue of the reference takes the IMGT number of that reference residue. Query residues inserted relative to the
    reference get no framework number. Reference residues deleted in the query use up their number.
---------------------------------------------------------------------------------------------------------------------
'''

from collections import namedtuple
from types import MappingProxyType

from .alignment import aligned_pairs
from .regions import FR1, CDR1, FR2, CDR2, FR3, CDR3, FR4
from .errors import RegionTooLong, CDR3TooShort


PositionLabel = namedtuple("PositionLabel", ["position", "label"])

# IMGT positions covered by the frameworks
framework_spans = MappingProxyType({FR1: range(1, 27),
                                    FR2: range(39, 56),
                                    FR3: range(66, 105),
                                    FR4: range(118, 129)})

cdr1_numbers = MappingProxyType({
    12: (27, 28, 29, 30, 31, 32, 33, 34, 35, 36, 37, 38),
    11: (27, 28, 29, 30, 31, 32, 34, 35, 36, 37, 38),
    10: (27, 28, 29, 30, 31, 34, 35, 36, 37, 38),
    9:  (27, 28, 29, 30, 31, 35, 36, 37, 38),
    8:  (27, 28, 29, 30, 35, 36, 37, 38),
    7:  (27, 28, 29, 30, 36, 37, 38),
    6:  (27, 28, 29, 36, 37, 38),
    5:  (27, 28, 29, 37, 38),
})

cdr2_numbers = MappingProxyType({
    10: (56, 57, 58, 59, 60, 61, 62, 63, 64, 65),
    9:  (56, 57, 58, 59, 60, 62, 63, 64, 65),
    8:  (56, 57, 58, 59, 62, 63, 64, 65),
    7:  (56, 57, 58, 59, 63, 64, 65),
    6:  (56, 57, 58, 63, 64, 65),
    5:  (56, 57, 58, 64, 65),
    4:  (56, 57, 64, 65),
    3:  (56, 57, 65),
    2:  (56, 65),
    1:  (56,),
    0:  (),
})

cdr3_numbers = MappingProxyType({
    13: (105, 106, 107, 108, 109, 110, 111, 112, 113, 114, 115, 116, 117),
    12: (105, 106, 107, 108, 109, 110, 112, 113, 114, 115, 116, 117),
    11: (105, 106, 107, 108, 109, 110, 113, 114, 115, 116, 117),
    10: (105, 106, 107, 108, 109, 113, 114, 115, 116, 117),
    9:  (105, 106, 107, 108, 109, 114, 115, 116, 117),
    8:  (105, 106, 107, 108, 114, 115, 116, 117),
    7:  (105, 106, 107, 108, 115, 116, 117),
    6:  (105, 106, 107, 115, 116, 117),
    5:  (105, 106, 107, 116, 117),
})

cdr_tables = MappingProxyType({CDR1: cdr1_numbers, CDR2: cdr2_numbers, CDR3: cdr3_numbers})

cdr3_min_length = 5
cdr3_max_length = 13


def _label_positions(labels, start):
    return [PositionLabel(start + i, str(label)) for i, label in enumerate(labels)]


def get_cdr_labels(name, length):
    """
    Get the IMGT labels for a CDR of a given length

    @param name: One of CDR1-IMGT, CDR2-IMGT or CDR3-IMGT
    @param length: The number of residues in the loop

    @return: List of label strings in sequence order
    """
    if name == CDR3:
        return get_cdr3_labels(length)
    try:
        return [str(number) for number in cdr_tables[name][length]]
    except KeyError:
        raise RegionTooLong(name, length)


def get_cdr3_labels(length):
    """
    Get the IMGT labels for a CDR3 of a given length.

    Up to 13 residues the labels are looked up. Longer loops take 105-111 on the first seven residues and 113-117 on
    the last five. The residues in between get the insertion labels followed by 112.
    """
    if length < cdr3_min_length:
        raise CDR3TooShort(length)

    if length <= cdr3_max_length:
        return [str(number) for number in cdr3_numbers[length]]

    return ([str(number) for number in range(105, 112)]
            + insertions_between_111_and_112(length - cdr3_max_length)
            + ["112"]
            + [str(number) for number in range(113, 118)])


def insertions_between_111_and_112(n_extra_positions):
    """
    Insertion labels for a CDR3 with n_extra_positions more residues than IMGT positions.

    The lower half is added after 111 counting up and the upper half before 112 counting down e.g. for 5
    111.0 111.1 112.2 112.1 112.0
    """
    n_111 = n_extra_positions // 2
    n_112 = n_extra_positions - n_111
    return (["111.%d" % i for i in range(n_111)]
            + ["112.%d" % i for i in reversed(range(n_112))])


def number_region(region):
    """
    Number the residues of a CDR region

    @param region: A CDR Region on the query

    @return: List of PositionLabels, one for each residue in the region in sequence order
    @raise RegionTooLong: if CDR1 or CDR2 has no entry in the IMGT tables
    @raise CDR3TooShort: if CDR3 has fewer than five residues
    """
    if region.label not in cdr_tables:
        raise ValueError("Region %s is not numbered by length. Use number_framework." % region.label)
    return _label_positions(get_cdr_labels(region.label, region.length), region.start)


def number_framework(region, alignment, canonical_span, missing_numbers=()):
    """
    Number the residues of a framework region through the alignment to the reference.

    @param region: A framework Region on the query
    @param alignment: Alignment of the reference (x) to the query (y)
    @param canonical_span: The IMGT positions of the framework (see framework_spans)
    @param missing_numbers: IMGT positions that the reference has no residue for (ReferenceSequence.missing_numbers)

    @return: List of PositionLabels in sequence order. Only residues inside the region are labelled.
    """
    missing_numbers = set(missing_numbers)
    numbers = [n for n in canonical_span if n not in missing_numbers]
    if not numbers:
        return []

    # Index of the first framework residue on the reference
    offset = numbers[0] - 1 - sum(1 for m in missing_numbers if m < numbers[0])
    reference_numbers = dict((offset + i, n) for i, n in enumerate(numbers))

    numbering = []
    for x, y, _ in aligned_pairs(alignment):
        if x in reference_numbers and region.start <= y < region.end:
            numbering.append(PositionLabel(y, str(reference_numbers[x])))
    return numbering
