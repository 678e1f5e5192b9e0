#    numerotator - IMGT Numbering of Antibody Variable Regions
#    Copyright (C) 2026 The numerotator developers
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the BSD 3-Clause License.
#
#    You should have received a copy of the BSD 3-Clause Licence
#    along with this program.  If not, see <https://opensource.org/license/bsd-3-clause/>.

'''
Curated IMGT reference sequences.

Each reference is a single line of an IMGT gapped alignment (128 columns, one per IMGT position) such as

    QVQLVQSGA-EVKKPGASVKVSCKASGYTF----TSYGISWVRQAPGQGLEWMGWISAY--NGNTNYAQKLQ-GRVTMTTDTSTSTAYMELRSLRSDDTAVYYCAR--------MDVWGQGTTVTVSS

The five conserved residues of the V-region (cysteine 23, tryptophan 41, hydrophobic 89, cysteine 104 and
phenylalanine/tryptophan 118) orient the numbering. Their positions are precomputed for every reference and
transferred to query sequences through an alignment (see regions.py).

The curated catalog is loaded once per process and shared read only.
'''

import os
import logging
from collections import namedtuple
from functools import lru_cache
from types import MappingProxyType

from .errors import InvalidAlignment

log = logging.getLogger(__name__)

numerotator_path = os.path.split(__file__)[0]
default_reference_file = os.path.join(numerotator_path, "dat", "reference.stockholm")
default_blacklist_file = os.path.join(numerotator_path, "dat", "blacklist.txt")

gap_characters = set("-.")

# The last IMGT position of a V-region (J end)
imgt_length = 128

# Anchor name, IMGT position and the residues allowed there
conserved_positions = [("first_cys", 23, "C"),
                       ("conserved_trp", 41, "W"),
                       ("hydrophobic_89", 89, "AILMFWYV"),
                       ("second_cys", 104, "C"),
                       ("j_trp_or_phe", 118, "FW")]

AnchorSet = namedtuple("AnchorSet", [name for name, _, _ in conserved_positions])


def count_gaps_before(alignment, index):
    """
    Count the number of gap characters among the first index characters of a gapped string.
    """
    return sum(1 for c in alignment[:index] if c in gap_characters)


def is_valid_alignment(alignment):
    """
    Check that the conserved residues are found at their IMGT positions in a gapped alignment string.
    """
    if len(alignment) < conserved_positions[-1][1]:
        return False
    return all(alignment[position-1].upper() in allowed for _, position, allowed in conserved_positions)


def find_anchors(alignment, identifier=""):
    """
    Find the anchor positions of a reference from its gapped alignment string.

    Each anchor is the IMGT position less the number of gaps in front of it, i.e. the 1-based position of the conserved
    residue in the ungapped sequence.

    @raise InvalidAlignment: if the conserved residues are not where they should be.
    """
    if not is_valid_alignment(alignment):
        raise InvalidAlignment(identifier)
    return AnchorSet(*[position - count_gaps_before(alignment, position) for _, position, _ in conserved_positions])


class ReferenceSequence(namedtuple("ReferenceSequence", ["identifier", "alignment", "anchors"])):
    __slots__ = ()

    @classmethod
    def from_alignment(cls, identifier, alignment):
        """
        Create a reference from an identifier and its gapped alignment string.

        @raise InvalidAlignment: if the alignment string fails the conserved residue check.
        """
        return cls(identifier, alignment, find_anchors(alignment, identifier))

    @property
    def sequence(self):
        """
        The ungapped reference sequence
        """
        return "".join(c for c in self.alignment if c not in gap_characters)

    @property
    def missing_numbers(self):
        """
        The IMGT numbers (1-128) that this reference has no residue for.
        """
        return frozenset(number for number in range(1, imgt_length+1)
                         if number > len(self.alignment) or self.alignment[number-1] in gap_characters)


## Parsing the curated data ##
def parse_reference_catalog(handle):
    """
    Parse (identifier, alignment string) pairs from a whitespace delimited table.

    Comment and markup lines (# and //) are skipped so a minimal stockholm file can be read directly.
    """
    catalog = []
    for line in handle:
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("//"):
            continue
        fields = line.split()
        assert len(fields) == 2, "Reference lines should have an identifier and an alignment. Got: %s" % line
        catalog.append((fields[0], fields[1]))
    return catalog


def read_blacklist(handle):
    """
    Read whitespace separated identifiers. Everything after a # on a line is ignored.
    """
    blacklist = set()
    for line in handle:
        blacklist.update(line.split("#", 1)[0].split())
    return blacklist


def build_reference_model(catalog, blacklist=()):
    """
    Build the reference sequences from the curated catalog.

    @param catalog: Iterable of (identifier, gapped alignment string) pairs
    @param blacklist: Identifiers that should be excluded

    @return: A dictionary of identifier to ReferenceSequence. Entries that fail the conserved residue check are
             dropped with a warning.
    """
    blacklist = set(blacklist)
    references = {}
    for identifier, alignment in catalog:
        if identifier in blacklist:
            log.debug("Skipping blacklisted reference %s", identifier)
            continue
        try:
            references[identifier] = ReferenceSequence.from_alignment(identifier, alignment)
        except InvalidAlignment as e:
            log.warning("Dropping reference: %s", e)
    return references


@lru_cache(maxsize=None)
def _load_reference_sequences(reference_file, blacklist_file):
    log.debug("Initializing reference sequences from %s", reference_file)
    with open(reference_file) as handle:
        catalog = parse_reference_catalog(handle)
    blacklist = set()
    if blacklist_file:
        with open(blacklist_file) as handle:
            blacklist = read_blacklist(handle)
    references = build_reference_model(catalog, blacklist)
    log.debug("Loaded %d of %d reference sequences", len(references), len(catalog))
    return MappingProxyType(references)


def get_reference_sequences(reference_file=None, blacklist_file=None):
    """
    Get the curated reference sequences.

    The catalog is read once per process for each pair of files and shared by all callers.

    @param reference_file: Path to a reference catalog. Defaults to the packaged IMGT references.
    @param blacklist_file: Path to a blacklist. Defaults to the packaged blacklist when the packaged catalog is used.

    @return: A read only mapping of identifier to ReferenceSequence
    """
    if reference_file is None:
        reference_file = default_reference_file
        if blacklist_file is None:
            blacklist_file = default_blacklist_file
    return _load_reference_sequences(reference_file, blacklist_file)
