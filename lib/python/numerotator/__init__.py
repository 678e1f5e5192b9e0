#    numerotator - IMGT Numbering of Antibody Variable Regions
#    Copyright (C) 2026 The numerotator developers
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the BSD 3-Clause License.
#
#    You should have received a copy of the BSD 3-Clause Licence
#    along with this program.  If not, see <https://opensource.org/license/bsd-3-clause/>.

from .numerotator import (numerotator, run_numerotator, number, find_best_reference, number_alignment,
                          annotate_reference, apply_annotation, write_annotations, write_results, csv_output,
                          read_sequences, validate_sequence, NumberingResult)
from .references import (get_reference_sequences, build_reference_model, parse_reference_catalog, read_blacklist,
                         ReferenceSequence, AnchorSet)
from .alignment import Alignment, align_local, identity_alignment
from .regions import Region, transfer_anchors, detect_regions
from .schemes import PositionLabel, number_region, number_framework
from .errors import (NumberingError, InvalidAlignment, AnchorNotAligned, OverlappingRegions, RegionTooLong,
                     CDR3TooShort, NoReferenceFound)
