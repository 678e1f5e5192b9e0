from numerotator.alignment import (Alignment, MATCH, SUBSTITUTION, DELETE, INSERT, REFERENCE_CLIP, QUERY_CLIP,
                                   path_from_blocks, align_local, identity_alignment, aligned_pairs, query_extent)

heavy = "QVQLVQSGAEVKKPGASVKVSCKASGYTFTSYGISWVRQAPGQGLEWMGWISAYNGNTNYAQKLQGRVTMTTDTSTSTAYMELRSLRSDDTAVYYCARMDVWGQGTTVTVSS"


def test_identity_alignment():
    alignment = identity_alignment("ACD")
    assert alignment.path == ((1, 1, MATCH), (2, 2, MATCH), (3, 3, MATCH))
    assert (alignment.reference_start, alignment.reference_end) == (0, 3)
    assert (alignment.query_start, alignment.query_end) == (0, 3)
    assert list(aligned_pairs(alignment)) == [(0, 0, MATCH), (1, 1, MATCH), (2, 2, MATCH)]
    assert query_extent(alignment) == (0, 3)


def test_path_with_delete():
    # E of the reference is missing from the query
    path = path_from_blocks("ACDEFG", "ACDFG", [(0, 3), (4, 6)], [(0, 3), (3, 5)])
    assert path == [(1, 1, MATCH), (2, 2, MATCH), (3, 3, MATCH), (4, 3, DELETE), (5, 4, MATCH), (6, 5, MATCH)]


def test_path_with_insert():
    path = path_from_blocks("ACFG", "ACDFG", [(0, 2), (2, 4)], [(0, 2), (3, 5)])
    assert path == [(1, 1, MATCH), (2, 2, MATCH), (2, 3, INSERT), (3, 4, MATCH), (4, 5, MATCH)]


def test_path_with_clips():
    path = path_from_blocks("WWACD", "ACDYY", [(2, 5)], [(0, 3)])
    assert path == [(2, 0, REFERENCE_CLIP), (3, 1, MATCH), (4, 2, MATCH), (5, 3, MATCH), (5, 5, QUERY_CLIP)]

    alignment = Alignment(3, 2, 5, 0, 3, tuple(path))
    assert query_extent(alignment) == (0, 3)
    assert list(aligned_pairs(alignment)) == [(2, 0, MATCH), (3, 1, MATCH), (4, 2, MATCH)]


def test_path_substitution():
    path = path_from_blocks("ACD", "AcE", [(0, 3)], [(0, 3)])
    assert [op for _, _, op in path] == [MATCH, MATCH, SUBSTITUTION]


def test_query_extent_leading_delete():
    alignment = Alignment(0, 0, 3, 0, 2, ((1, 0, DELETE), (2, 1, MATCH), (3, 2, MATCH)))
    assert query_extent(alignment) == (0, 2)


def test_align_to_self():
    alignment = align_local(heavy, heavy)
    assert alignment.score == len(heavy)
    assert alignment.path == identity_alignment(heavy).path
    assert (alignment.query_start, alignment.query_end) == (0, len(heavy))


def test_align_query_prefix():
    alignment = align_local(heavy, "GGGG" + heavy)
    assert alignment.path[0] == (0, 4, QUERY_CLIP)
    assert alignment.query_start == 4
    assert query_extent(alignment) == (4, len(heavy) + 4)


def test_align_deletion():
    # Remove the I at position 50 of the query
    query = heavy[:50] + heavy[51:]
    alignment = align_local(heavy, query)

    deletes = [entry for entry in alignment.path if entry[2] == DELETE]
    assert deletes == [(51, 50, DELETE)]
    assert len(list(aligned_pairs(alignment))) == len(heavy) - 1
    assert query_extent(alignment) == (0, len(query))
