#    numerotator - IMGT Numbering of Antibody Variable Regions
#    Copyright (C) 2026 The numerotator developers
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the BSD 3-Clause License.
#
#    You should have received a copy of the BSD 3-Clause Licence
#    along with this program.  If not, see <https://opensource.org/license/bsd-3-clause/>.

'''
Pairwise alignments between a reference (x) and a query (y) sequence.

An alignment is described by its path: an ordered list of (reference_position, query_position, operation) triples.
The positions in the path are 1-based and give the coordinates *after* the operation has been applied, so a match
entry carries the 1-based indices of the two residues it pairs and a delete entry carries the reference residue that
is missing from the query together with the last query residue seen.

    operation   advances
    M  match         x y
    S  substitution  x y
    D  delete        x        (reference residue absent from the query)
    I  insert          y      (query residue absent from the reference)
    X  reference clip x       (one entry for the whole clipped stretch)
    Y  query clip      y

Everything outside this module works in 0-based indices. aligned_pairs and query_extent are the only places where
path coordinates are converted.
'''

from collections import namedtuple

from Bio.Align import PairwiseAligner

MATCH = "M"
SUBSTITUTION = "S"
DELETE = "D"
INSERT = "I"
REFERENCE_CLIP = "X"
QUERY_CLIP = "Y"

aligned_operations = (MATCH, SUBSTITUTION)
clip_operations = (REFERENCE_CLIP, QUERY_CLIP)

# Scores of the local aligner. A gap of length k costs -5 - k.
match_score = 1
mismatch_score = -1
open_gap_score = -6
extend_gap_score = -1


Alignment = namedtuple("Alignment", ["score", "reference_start", "reference_end", "query_start", "query_end", "path"])


def get_aligner():
    """
    Build the local aligner used to place a query on a reference sequence.
    """
    aligner = PairwiseAligner()
    aligner.mode = "local"
    aligner.match_score = match_score
    aligner.mismatch_score = mismatch_score
    aligner.open_gap_score = open_gap_score
    aligner.extend_gap_score = extend_gap_score
    return aligner


def path_from_blocks(reference, query, reference_blocks, query_blocks):
    """
    Build an alignment path from the aligned blocks of a pairwise alignment.

    @param reference: The reference sequence (x)
    @param query: The query sequence (y)
    @param reference_blocks: List of (start, end) python intervals on the reference, one per gapless block
    @param query_blocks: The corresponding (start, end) intervals on the query

    @return: The path as a list of (reference_position, query_position, operation) with 1-based positions.
    """
    path = []
    if not reference_blocks:
        return path

    x, y = reference_blocks[0][0], query_blocks[0][0]
    if x:
        path.append((x, 0, REFERENCE_CLIP))
    if y:
        path.append((x, y, QUERY_CLIP))

    for (rs, re), (qs, qe) in zip(reference_blocks, query_blocks):
        # Gaps between two blocks. Reference residues first so the path stays ordered on x.
        while x < rs:
            x += 1
            path.append((x, y, DELETE))
        while y < qs:
            y += 1
            path.append((x, y, INSERT))

        for _ in range(re - rs):
            x += 1
            y += 1
            if reference[x-1].upper() == query[y-1].upper():
                path.append((x, y, MATCH))
            else:
                path.append((x, y, SUBSTITUTION))

    if x < len(reference):
        x = len(reference)
        path.append((x, y, REFERENCE_CLIP))
    if y < len(query):
        y = len(query)
        path.append((x, y, QUERY_CLIP))

    return path


def from_pairwise(pairwise_alignment, reference, query):
    """
    Convert a Biopython pairwise alignment (target=reference, query=query) into an Alignment.
    """
    reference_blocks, query_blocks = pairwise_alignment.aligned
    reference_blocks = [(int(s), int(e)) for s, e in reference_blocks]
    query_blocks = [(int(s), int(e)) for s, e in query_blocks]

    path = path_from_blocks(reference, query, reference_blocks, query_blocks)
    if not reference_blocks:
        return Alignment(pairwise_alignment.score, 0, 0, 0, 0, tuple(path))

    return Alignment(pairwise_alignment.score,
                     reference_blocks[0][0], reference_blocks[-1][1],
                     query_blocks[0][0], query_blocks[-1][1],
                     tuple(path))


def align_local(reference, query, aligner=None):
    """
    Locally align a query to a reference sequence.

    @param reference: The (ungapped) reference sequence string
    @param query: The query sequence string
    @param aligner: A configured Bio.Align.PairwiseAligner. The default local aligner is used if not given.

    @return: The best scoring Alignment or None if no local alignment has a positive score.
    """
    if aligner is None:
        aligner = get_aligner()
    best = next(iter(aligner.align(reference, query)), None)
    if best is None or best.score <= 0:
        return None
    return from_pairwise(best, reference, query)


def identity_alignment(sequence):
    """
    An alignment of a sequence to itself in which every residue is a match.
    """
    n = len(sequence)
    path = tuple((i, i, MATCH) for i in range(1, n+1))
    return Alignment(n, 0, n, 0, n, path)


def aligned_pairs(alignment):
    """
    Iterate over the residue pairs of an alignment.

    @return: Generator of (reference_index, query_index, operation) with 0-based indices for every match and
             substitution in the path.
    """
    for x, y, op in alignment.path:
        if op in aligned_operations:
            yield x-1, y-1, op


def query_extent(alignment):
    """
    The part of the query covered by the alignment, ignoring clipped residues.

    @return: python (start, end) indices on the query.
    """
    body = [(x, y, op) for x, y, op in alignment.path if op not in clip_operations]
    assert body, "Alignment does not contain any aligned residues."

    _, first_y, first_op = body[0]
    if first_op == DELETE: # No query residue consumed yet. The region starts at the next one.
        start = first_y
    else:
        start = first_y - 1
    end = body[-1][1]
    return start, end
