#    numerotator - IMGT Numbering of Antibody Variable Regions
#    Copyright (C) 2026 The numerotator developers
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the BSD 3-Clause License.
#
#    You should have received a copy of the BSD 3-Clause Licence
#    along with this program.  If not, see <https://opensource.org/license/bsd-3-clause/>.

'''
Division of an aligned V-region into the IMGT framework and CDR regions.

The conserved residues of a reference are transferred to the query through the alignment. The frameworks are
placed at fixed offsets from them and the CDRs fill the space in between:

    FR1   v-region start        .. first_cys + 3
    CDR1  end of FR1            .. start of FR2
    FR2   conserved_trp - 2     .. conserved_trp + 14
    CDR2  end of FR2            .. start of FR3
    FR3   hydrophobic_89 - 23   .. second_cys
    CDR3  end of FR3            .. start of FR4
    FR4   j_trp_or_phe          .. v-region end

N.B. the v-region start and end come from the extent of the local alignment. If the alignment does not reach the
first or last residue of the reference FR1 and FR4 are shortened accordingly.
'''

import logging
from collections import namedtuple

from .alignment import aligned_pairs, query_extent
from .references import AnchorSet
from .errors import AnchorNotAligned, OverlappingRegions

log = logging.getLogger(__name__)

FR1, CDR1, FR2, CDR2, FR3, CDR3, FR4 = region_names = ("FR1-IMGT", "CDR1-IMGT", "FR2-IMGT", "CDR2-IMGT",
                                                       "FR3-IMGT", "CDR3-IMGT", "FR4-IMGT")
framework_names = (FR1, FR2, FR3, FR4)
cdr_names = (CDR1, CDR2, CDR3)


class Region(namedtuple("Region", ["start", "end", "label"])):
    """
    A python interval [start, end) on the query sequence.
    """
    __slots__ = ()

    @property
    def length(self):
        return self.end - self.start


def transfer_anchors(anchors, alignment):
    """
    Transfer the anchor positions of a reference to the query of an alignment.

    An anchor is the 1-based position of its conserved residue. The residue is looked up at index anchor - 1 and the
    query residue it pairs with is returned in the same 1-based form.

    @param anchors: AnchorSet on the reference (x) sequence
    @param alignment: Alignment of the reference to the query

    @return: AnchorSet on the query (y) sequence
    @raise AnchorNotAligned: if a conserved residue is not matched or substituted in the alignment
    """
    query_index = {}
    for x, y, _ in aligned_pairs(alignment):
        query_index.setdefault(x, y)

    transferred = []
    for name, position in zip(AnchorSet._fields, anchors):
        if position - 1 not in query_index:
            raise AnchorNotAligned(name)
        transferred.append(query_index[position - 1] + 1)
    return AnchorSet(*transferred)


def detect_regions(anchors, alignment):
    """
    Place the seven IMGT regions on the query.

    @param anchors: AnchorSet on the query sequence (see transfer_anchors)
    @param alignment: The alignment the anchors were transferred through. Its extent gives the v-region ends.

    @return: List of seven Regions in the order FR1, CDR1, FR2, CDR2, FR3, CDR3, FR4
    @raise OverlappingRegions: if a framework runs into the next one
    """
    v_region_start, v_region_end = query_extent(alignment)

    fr1 = Region(v_region_start, anchors.first_cys + 3, FR1)
    fr2 = Region(anchors.conserved_trp - 2, anchors.conserved_trp + 14, FR2)
    fr3 = Region(anchors.hydrophobic_89 - 23, anchors.second_cys, FR3)
    fr4 = Region(anchors.j_trp_or_phe, v_region_end, FR4)

    # Stop at the first pair that overlaps
    for left, right in ((fr1, fr2), (fr2, fr3), (fr3, fr4)):
        if left.end > right.start:
            raise OverlappingRegions(left.label, right.label)

    cdr1 = Region(fr1.end, fr2.start, CDR1)
    cdr2 = Region(fr2.end, fr3.start, CDR2)
    cdr3 = Region(fr3.end, fr4.start, CDR3)

    log.debug("Regions: %s", ", ".join("%s %d-%d" % (r.label, r.start, r.end) for r in (fr1, cdr1, fr2, cdr2, fr3, cdr3, fr4)))
    return [fr1, cdr1, fr2, cdr2, fr3, cdr3, fr4]
