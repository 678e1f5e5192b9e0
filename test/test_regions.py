import pytest

from numerotator.alignment import Alignment, DELETE, identity_alignment
from numerotator.references import AnchorSet, ReferenceSequence, get_reference_sequences
from numerotator.regions import (Region, transfer_anchors, detect_regions, region_names,
                                 FR1, CDR1, FR2, CDR2, FR3, CDR3, FR4)
from numerotator.errors import AnchorNotAligned, OverlappingRegions

heavy_alignment = "QVQLVQSGA-EVKKPGASVKVSCKASGYTF----TSYGISWVRQAPGQGLEWMGWISAY--NGNTNYAQKLQ-GRVTMTTDTSTSTAYMELRSLRSDDTAVYYCAR--------MDVWGQGTTVTVSS"
heavy = ReferenceSequence.from_alignment("heavy", heavy_alignment)


def test_identity_round_trip():
    for reference in list(get_reference_sequences().values()) + [heavy]:
        alignment = identity_alignment(reference.sequence)
        assert transfer_anchors(reference.anchors, alignment) == reference.anchors

    assert transfer_anchors(heavy.anchors, identity_alignment(heavy.sequence)) == AnchorSet(22, 36, 81, 96, 102)


def test_transfer_through_offset():
    # Query with four extra residues at the front
    path = ((0, 4, "Y"),) + tuple((i, i + 4, "M") for i in range(1, len(heavy.sequence) + 1))
    alignment = Alignment(len(heavy.sequence), 0, len(heavy.sequence), 4, len(heavy.sequence) + 4, path)
    assert transfer_anchors(heavy.anchors, alignment) == AnchorSet(26, 40, 85, 100, 106)


def delete_from_identity(sequence, deleted):
    """Identity alignment path of a sequence with the residue at 1-based position deleted from the query."""
    path = []
    for x, y, op in identity_alignment(sequence).path:
        if x < deleted:
            path.append((x, y, op))
        elif x == deleted:
            path.append((x, y - 1, DELETE))
        else:
            path.append((x, y - 1, op))
    return Alignment(0, 0, len(sequence), 0, len(sequence) - 1, tuple(path))


def test_anchor_not_aligned():
    # The first cysteine (position 22 of the ungapped reference) is deleted from the query
    alignment = delete_from_identity(heavy.sequence, 22)

    with pytest.raises(AnchorNotAligned) as excinfo:
        transfer_anchors(heavy.anchors, alignment)
    assert excinfo.value.anchor_name == "first_cys"


def test_transfer_with_deletion_after_anchor():
    # The residue after the first cysteine is deleted. The cysteine itself is still matched.
    alignment = delete_from_identity(heavy.sequence, 23)
    assert transfer_anchors(heavy.anchors, alignment) == AnchorSet(22, 35, 80, 95, 101)


def test_sample_regions():
    alignment = identity_alignment(heavy.sequence)
    regions = detect_regions(heavy.anchors, alignment)

    assert regions == [Region(0, 25, FR1),
                       Region(25, 34, CDR1),
                       Region(34, 50, FR2),
                       Region(50, 58, CDR2),
                       Region(58, 96, FR3),
                       Region(96, 102, CDR3),
                       Region(102, 112, FR4)]
    assert [r.length for r in regions] == [25, 9, 16, 8, 38, 6, 10]


def test_regions_are_contiguous():
    for reference in get_reference_sequences().values():
        regions = detect_regions(reference.anchors, identity_alignment(reference.sequence))
        assert [r.label for r in regions] == list(region_names)
        assert regions[0].start == 0
        assert regions[-1].end == len(reference.sequence)
        for left, right in zip(regions, regions[1:]):
            assert left.end == right.start
        for region in regions:
            assert region.start <= region.end


@pytest.mark.parametrize("anchors, overlapping", [
    (AnchorSet(40, 36, 81, 96, 102), (FR1, FR2)),
    (AnchorSet(22, 36, 70, 96, 102), (FR2, FR3)),
    (AnchorSet(22, 36, 81, 96, 90), (FR3, FR4)),
    # Both FR1/FR2 and FR2/FR3 overlap. Only the first is reported.
    (AnchorSet(40, 36, 70, 96, 102), (FR1, FR2)),
])
def test_overlapping_regions(anchors, overlapping):
    with pytest.raises(OverlappingRegions) as excinfo:
        detect_regions(anchors, identity_alignment(heavy.sequence))
    assert excinfo.value.regions == overlapping
