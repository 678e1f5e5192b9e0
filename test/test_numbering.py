import pytest

from numerotator.alignment import identity_alignment
from numerotator.references import ReferenceSequence
from numerotator.regions import Region, detect_regions, FR1, CDR1, FR2, CDR2, FR3, CDR3, FR4
from numerotator.schemes import (number_region, number_framework, framework_spans, cdr1_numbers, cdr2_numbers,
                                 get_cdr3_labels, insertions_between_111_and_112)
from numerotator.errors import RegionTooLong, CDR3TooShort

heavy_alignment = "QVQLVQSGA-EVKKPGASVKVSCKASGYTF----TSYGISWVRQAPGQGLEWMGWISAY--NGNTNYAQKLQ-GRVTMTTDTSTSTAYMELRSLRSDDTAVYYCAR--------MDVWGQGTTVTVSS"
heavy = ReferenceSequence.from_alignment("heavy", heavy_alignment)


def labels(numbering):
    return [label for _, label in numbering]


@pytest.mark.parametrize("length", range(5, 13))
def test_cdr1_table(length):
    numbering = number_region(Region(10, 10 + length, CDR1))
    assert labels(numbering) == [str(n) for n in cdr1_numbers[length]]
    assert [p for p, _ in numbering] == list(range(10, 10 + length))


@pytest.mark.parametrize("length", range(0, 11))
def test_cdr2_table(length):
    numbering = number_region(Region(50, 50 + length, CDR2))
    assert labels(numbering) == [str(n) for n in cdr2_numbers[length]]
    assert len(numbering) == length


def test_cdr_tables():
    assert labels(number_region(Region(0, 9, CDR1))) == ["27", "28", "29", "30", "31", "35", "36", "37", "38"]
    assert labels(number_region(Region(0, 2, CDR2))) == ["56", "65"]
    assert number_region(Region(5, 5, CDR2)) == []


def test_region_too_long():
    with pytest.raises(RegionTooLong) as excinfo:
        number_region(Region(0, 13, CDR1))
    assert excinfo.value.region_name == "CDR1-IMGT"
    assert excinfo.value.length == 13

    with pytest.raises(RegionTooLong) as excinfo:
        number_region(Region(0, 11, CDR2))
    assert excinfo.value.region_name == "CDR2-IMGT"
    assert excinfo.value.length == 11

    # No table entry for very short CDR1s either
    with pytest.raises(RegionTooLong):
        number_region(Region(0, 4, CDR1))


def test_cdr3_too_short():
    with pytest.raises(CDR3TooShort) as excinfo:
        number_region(Region(0, 4, CDR3))
    assert excinfo.value.length == 4


def test_cdr3():
    assert get_cdr3_labels(13) == [str(n) for n in range(105, 118)]
    assert get_cdr3_labels(5) == ["105", "106", "107", "116", "117"]
    assert get_cdr3_labels(14) == ["105", "106", "107", "108", "109", "110", "111",
                                   "112.0", "112",
                                   "113", "114", "115", "116", "117"]
    assert get_cdr3_labels(19) == ["105", "106", "107", "108", "109", "110", "111",
                                   "111.0", "111.1", "111.2", "112.2", "112.1", "112.0", "112",
                                   "113", "114", "115", "116", "117"]

    numbering = number_region(Region(96, 115, CDR3))
    assert numbering[0] == (96, "105")
    assert numbering[-1] == (114, "117")


def test_insertions():
    assert insertions_between_111_and_112(0) == []
    assert insertions_between_111_and_112(1) == ["112.0"]
    assert insertions_between_111_and_112(5) == ["111.0", "111.1", "112.2", "112.1", "112.0"]


@pytest.mark.parametrize("length", range(5, 40))
def test_cdr3_labels_unique(length):
    cdr3 = get_cdr3_labels(length)
    assert len(cdr3) == length
    assert len(set(cdr3)) == length


def test_framework_numbering():
    alignment = identity_alignment(heavy.sequence)
    regions = dict((r.label, r) for r in detect_regions(heavy.anchors, alignment))
    missing = heavy.missing_numbers

    fr1 = number_framework(regions[FR1], alignment, framework_spans[FR1], missing)
    assert labels(fr1) == [str(n) for n in list(range(1, 10)) + list(range(11, 27))]
    assert [p for p, _ in fr1] == list(range(0, 25))
    assert fr1[21] == (21, "23") # first cysteine

    fr2 = number_framework(regions[FR2], alignment, framework_spans[FR2], missing)
    assert labels(fr2) == [str(n) for n in range(40, 56)]
    assert [p for p, _ in fr2] == list(range(34, 50))

    fr3 = number_framework(regions[FR3], alignment, framework_spans[FR3], missing)
    assert labels(fr3) == [str(n) for n in range(66, 105) if n != 73]
    assert fr3[-1] == (95, "104") # second cysteine

    fr4 = number_framework(regions[FR4], alignment, framework_spans[FR4], missing)
    assert labels(fr4) == [str(n) for n in range(119, 129)]
    assert [p for p, _ in fr4] == list(range(102, 112))


def test_framework_without_missing_numbers():
    # An ungapped FR1 of 26 residues numbered 1-26
    alignment = identity_alignment("A" * 30)
    numbering = number_framework(Region(0, 26, FR1), alignment, framework_spans[FR1])
    assert labels(numbering) == [str(n) for n in range(1, 27)]


def test_framework_region_not_numbered_by_length():
    with pytest.raises(ValueError):
        number_region(Region(0, 10, FR2))
