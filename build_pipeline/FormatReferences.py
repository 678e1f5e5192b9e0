#    numerotator - IMGT Numbering of Antibody Variable Regions
#    Copyright (C) 2026 The numerotator developers
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the BSD 3-Clause License.
#
#    You should have received a copy of the BSD 3-Clause Licence
#    along with this program.  If not, see <https://opensource.org/license/bsd-3-clause/>.

"""
Program to make the reference catalog of numerotator from a curated IMGT alignment.

The input is a stockholm alignment of putative germline sequences (combinations of v and j genes) gapped to the
IMGT numbering, one column per IMGT position. ANARCI's curated_alignments/ALL.stockholm is such a file.

Sequences that do not have the conserved residues (cysteine 23, tryptophan 41, hydrophobic 89, cysteine 104 and
phenylalanine/tryptophan 118) at their IMGT columns are left out.

Two files are written:
    o a minimal stockholm alignment of the kept sequences. This is the catalog read by numerotator.
      (lib/python/numerotator/dat/reference.stockholm)
    o a fasta file of the ungapped kept sequences.

Usage:
    python FormatReferences.py ALL.stockholm reference.stockholm reference.fasta
"""

import sys
import logging
import argparse

from Bio import AlignIO, SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from numerotator.references import is_valid_alignment, gap_characters

log = logging.getLogger("FormatReferences")


def read_references(stockholm_file):
    """
    Read the (identifier, gapped sequence) pairs of all the alignments in a stockholm file.

    Gaps are written as '-'.
    """
    sequences = {}
    for alignment in AlignIO.parse(stockholm_file, "stockholm"):
        for record in alignment:
            gapped = str(record.seq).replace(".", "-")
            if record.id in sequences:
                log.warning("Duplicated identifier %s. Keeping the first.", record.id)
                continue
            sequences[record.id] = gapped
    return sequences


def select_references(sequences):
    """
    Keep the sequences that pass the conserved residue check.
    """
    kept = {}
    for identifier, gapped in sequences.items():
        if is_valid_alignment(gapped):
            kept[identifier] = gapped
        else:
            log.info("Leaving out %s. Conserved residues are not at their IMGT positions.", identifier)
    return kept


def write_stockholm(sequences, ID, outfile):
    print("# STOCKHOLM 1.0", file=outfile)
    print("#=GF ID %s" % ID, file=outfile)

    pad_length = max(list(map(len, list(sequences.keys())))) + 1
    for s in sequences:
        print(s.replace(" ", "_").ljust(pad_length), sequences[s], file=outfile)
    print("#=GC RF".ljust(pad_length), "x" * len(sequences[s]), file=outfile)
    print("//", file=outfile)


def write_reference_fasta(sequences, outfile):
    records = (SeqRecord(Seq("".join(c for c in gapped if c not in gap_characters)), id=identifier, description="")
               for identifier, gapped in sequences.items())
    return SeqIO.write(records, outfile, "fasta")


def main(argv=None):
    parser = argparse.ArgumentParser(prog="FormatReferences", description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('stockholm_file', type=str, help="Curated IMGT gapped stockholm alignment.")
    parser.add_argument('output_alignments_file', type=str, help="Reference catalog to write (stockholm).")
    parser.add_argument('output_fasta_file', type=str, help="Ungapped reference sequences to write (fasta).")
    args = parser.parse_args(argv)

    logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    sequences = read_references(args.stockholm_file)
    references = select_references(sequences)
    if not references:
        log.error("None of the %d sequences in %s can be used as a reference.", len(sequences), args.stockholm_file)
        return 1

    with open(args.output_alignments_file, "w") as outfile:
        write_stockholm(references, "IMGT_references", outfile)
    with open(args.output_fasta_file, "w") as outfile:
        write_reference_fasta(references, outfile)

    log.info("Wrote %d of %d sequences as references.", len(references), len(sequences))
    return 0


if __name__ == "__main__":
    sys.exit(main())
