#    numerotator - IMGT Numbering of Antibody Variable Regions
#    Copyright (C) 2026 The numerotator developers
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the BSD 3-Clause License.
#
#    You should have received a copy of the BSD 3-Clause Licence
#    along with this program.  If not, see <https://opensource.org/license/bsd-3-clause/>.

'''
Command line interface of numerotator. Installed as the NUMEROTATOR script.
'''

import sys
import logging
import argparse

from .numerotator import run_numerotator, read_sequences, validate_sequence

log = logging.getLogger(__name__)

description = '''
NUMEROTATOR
IMGT numbering of antibody variable regions.

Sequences are aligned to curated IMGT reference sequences. The closest one is used to find the
FR1-IMGT, CDR1-IMGT, FR2-IMGT, CDR2-IMGT, FR3-IMGT, CDR3-IMGT and FR4-IMGT regions and to number
each residue. The output is a fasta file with one record per numbered residue (and per region with -a).
'''

epilogue = '''
Examples:
    NUMEROTATOR QVQLVQSGAEVKKPGASVKVSCKASGYTFTSYGISWVRQAPGQGLEWMGWISAYNGNTNYAQKLQGRVTMTTDTSTSTAYMELRSLRSDDTAVYYCARMDVWGQGTTVTVSS
    NUMEROTATOR -i sequences.fasta -a -n -o regions.fasta
    NUMEROTATOR -i sequences.fasta --csv -o numbering.csv --ncpu 4
'''


def get_parser():
    parser = argparse.ArgumentParser(prog="NUMEROTATOR", description=description, epilog=epilogue, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('sequences', type=str, nargs='*', help="Sequences to number. Identifiers 0, 1, ... are given in the order on the command line.")
    parser.add_argument('--sequences_file', '-i', type=str, default=None, help="A fasta file (optionally gzipped) of sequences to number.", dest="sequences_file")
    parser.add_argument('--outfile', '-o', type=str, default=None, help="The output file to use. Default is stdout", dest="outfile")
    parser.add_argument('--csv', action='store_true', default=False, help="Write the numbering as a csv table instead of fasta. Requires an output file.", dest="csv")
    parser.add_argument('--annotate_regions', '-a', action='store_true', default=False, help="Annotate the regions as well.", dest="annotate_regions")
    parser.add_argument('--no_number', '-n', action='store_true', default=False, help="Do not number the sequences. (Useful in combination with --annotate_regions)", dest="no_number")
    parser.add_argument('--ncpu', '-p', type=int, default=1, help="Number of parallel processes to use. Default is 1.", dest="ncpu")
    parser.add_argument('--reference_file', type=str, default=None, help="A reference catalog to use instead of the packaged IMGT references.", dest="reference_file")
    parser.add_argument('--blacklist_file', type=str, default=None, help="Identifiers of reference sequences that should not be used.", dest="blacklist_file")
    parser.add_argument('--verbose', '-v', action='store_true', default=False, help="Report debugging information.", dest="verbose")
    return parser


def main(argv=None):
    parser = get_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(stream=sys.stderr, level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.csv and not args.outfile:
        parser.error("--csv requires an output file (-o)")

    sequences = []
    for i, sequence in enumerate(args.sequences):
        try:
            validate_sequence(sequence)
        except AssertionError as e:
            log.error("Sequence %d from the command line: %s", i, e)
            return 1
        sequences.append((str(i), sequence))

    if args.sequences_file:
        log.info("Reading input sequences file %s", args.sequences_file)
        try:
            sequences += read_sequences(args.sequences_file)
        except (IOError, ValueError) as e:
            log.error("Could not read %s: %s", args.sequences_file, e)
            return 1

    if not sequences:
        log.error("No sequences to number.")
        return 1

    _, results = run_numerotator(sequences, ncpu=max(1, args.ncpu), output=True, outfile=args.outfile, csv=args.csv,
                                 annotate_regions=args.annotate_regions, number_residues=not args.no_number,
                                 reference_file=args.reference_file, blacklist_file=args.blacklist_file)

    log.info("Numbered %d of %d sequences", sum(1 for r in results if r is not None), len(sequences))
    return 0


if __name__ == "__main__":
    sys.exit(main())
