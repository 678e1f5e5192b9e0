#    numerotator - IMGT Numbering of Antibody Variable Regions
#    Copyright (C) 2026 The numerotator developers
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the BSD 3-Clause License.
#
#    You should have received a copy of the BSD 3-Clause Licence
#    along with this program.  If not, see <https://opensource.org/license/bsd-3-clause/>.

'''
Exceptions raised while numbering a sequence.

Every error is terminal for the reference or query being processed but never for a batch. The batch functions in
numerotator.py catch NumberingError, report it and move on to the next sequence.
'''


class NumberingError(Exception):
    def __init__(self, message):
        # Call the base class constructor with the parameters it needs
        super(NumberingError, self).__init__(message)


class InvalidAlignment(NumberingError):
    """
    A reference alignment string does not carry the conserved residues at IMGT 23, 41, 89, 104 and 118.
    """
    def __init__(self, identifier):
        self.identifier = identifier
        super(InvalidAlignment, self).__init__("Alignment %s did not have conserved residues in expected places." % identifier)


class AnchorNotAligned(NumberingError):
    def __init__(self, anchor_name):
        self.anchor_name = anchor_name
        super(AnchorNotAligned, self).__init__("Conserved residue %s is not matched in the alignment." % anchor_name)


class OverlappingRegions(NumberingError):
    def __init__(self, first, second):
        self.regions = (first, second)
        super(OverlappingRegions, self).__init__("Region '%s' and '%s' overlapped." % (first, second))


class RegionTooLong(NumberingError):
    def __init__(self, region_name, length):
        self.region_name = region_name
        self.length = length
        super(RegionTooLong, self).__init__("Unexpected length (%d) for region '%s'." % (length, region_name))


class CDR3TooShort(NumberingError):
    def __init__(self, length):
        self.length = length
        super(CDR3TooShort, self).__init__("CDR3 region too short. Expected at least 5, got %d" % length)


class NoReferenceFound(NumberingError):
    def __init__(self, identifier):
        self.identifier = identifier
        super(NoReferenceFound, self).__init__("Could not find reference sequence for record %s" % identifier)
