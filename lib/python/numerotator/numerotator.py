#    numerotator - IMGT Numbering of Antibody Variable Regions
#    Copyright (C) 2026 The numerotator developers
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the BSD 3-Clause License.
#
#    You should have received a copy of the BSD 3-Clause Licence
#    along with this program.  If not, see <https://opensource.org/license/bsd-3-clause/>.

'''
numerotator - IMGT numbering of antibody variable regions

numerotator aligns sequences to a curated set of IMGT gapped reference sequences. The best scoring reference is used
to place the conserved residues of the V-region on the query. From those the seven IMGT regions are derived:

    FR1-IMGT CDR1-IMGT FR2-IMGT CDR2-IMGT FR3-IMGT CDR3-IMGT FR4-IMGT

and every residue in them is given its IMGT number.

Notes:
 o CDRs are numbered according to their length. Frameworks are numbered through the alignment to the reference so
   residues inserted with respect to the reference are not numbered.
 o CDR3s longer than 13 residues get insertions 111.0, 111.1 ... and ... 112.1, 112.0 in the IMGT manner.
 o The v-region is the part of the query that aligns locally to the reference. If the alignment does not reach the
   ends of the reference FR1 and FR4 are shortened.
'''

import os
import sys
import gzip
import math
import logging
from collections import namedtuple
from functools import partial
from itertools import islice
from multiprocessing import Pool

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from .alignment import align_local, get_aligner, identity_alignment
from .references import get_reference_sequences
from .regions import transfer_anchors, detect_regions, cdr_names
from .schemes import number_region, number_framework, framework_spans
from .errors import NumberingError, NoReferenceFound

log = logging.getLogger(__name__)

amino_acids = sorted(list("QWERTYIPASDFGHKLCVNM"))
set_amino_acids = set(amino_acids)

NumberingResult = namedtuple("NumberingResult", ["reference", "score", "regions", "numbering"])


## Utility functions ##
def read_sequences(filename):
    """
    Read a (optionally gzipped) fasta file.

    @return: List of (id, sequence) tuples
    """
    if filename.endswith('.gz'):
        handle = gzip.open(filename, 'rt')
    else:
        handle = open(filename, 'r')
    with handle:
        return [(record.id, str(record.seq)) for record in SeqIO.parse(handle, "fasta")]


def validate_sequence(sequence):
    """
    Check whether a sequence is a protein sequence or if someone has submitted something nasty.
    """
    assert len(sequence) < 10000, "Sequence too long."
    assert not (set(sequence.upper()) - set_amino_acids), "Unknown amino acid letter found in sequence: %s" % ", ".join(sorted(set(sequence.upper()) - set_amino_acids))
    return True


def validate_numbering(numbering, name=""):
    """
    Check that the numbered positions increase along the sequence. They always should.
    """
    last = -1
    for position, _ in numbering:
        assert position > last, "Numbering was found to decrease along the sequence %s. Please report." % name
        last = position
    return numbering


def grouper(n, iterable):
    '''
    Group entries of an iterable by n
    '''
    it = iter(iterable)
    def take():
        while 1:
            yield list(islice(it, n))
    return iter(take().__next__, [])


## Finding a reference and numbering ##
def find_best_reference(sequence, references, aligner=None, identifier="query"):
    """
    Align a sequence to every reference and keep the best one.

    @param sequence: An amino acid sequence string
    @param references: Mapping of identifier to ReferenceSequence (see get_reference_sequences)
    @param aligner: Local aligner to use. The default one is made if not given.
    @param identifier: Name of the query. Used for error messages.

    @return: The best scoring (ReferenceSequence, Alignment). Ties go to the first reference identifier in sorted order.
    @raise NoReferenceFound: if no reference aligns to the sequence
    """
    if aligner is None:
        aligner = get_aligner()

    best_reference, best_alignment = None, None
    for reference_id in sorted(references):
        reference = references[reference_id]
        alignment = align_local(reference.sequence, sequence, aligner)
        if alignment is None:
            continue
        if best_alignment is None or alignment.score > best_alignment.score:
            best_reference, best_alignment = reference, alignment

    if best_alignment is None:
        raise NoReferenceFound(identifier)

    log.debug("Best reference for %s is %s (score %s)", identifier, best_reference.identifier, best_alignment.score)
    return best_reference, best_alignment


def number_alignment(reference, alignment):
    """
    Divide the query of an alignment into the IMGT regions and number its residues.

    @param reference: The ReferenceSequence that is the reference (x) of the alignment
    @param alignment: Alignment of the reference to the query

    @return: The list of seven Regions and the list of PositionLabels for the query in sequence order.
    """
    anchors = transfer_anchors(reference.anchors, alignment)
    log.debug("Transferred conserved residues of %s: %s", reference.identifier, anchors)

    regions = detect_regions(anchors, alignment)
    missing_numbers = reference.missing_numbers

    numbering = []
    for region in regions:
        if region.label in cdr_names:
            numbering += number_region(region)
        else:
            numbering += number_framework(region, alignment, framework_spans[region.label], missing_numbers)
    return regions, validate_numbering(numbering, reference.identifier)


def annotate_reference(reference):
    """
    Get the regions of a reference sequence by numbering it against itself.
    """
    regions, _ = number_alignment(reference, identity_alignment(reference.sequence))
    return regions


##################################
# High level numbering functions #
##################################

def numerotator(sequences, reference_file=None, blacklist_file=None):
    """
    The main function for numerotator. Find the closest reference for each sequence, divide it into regions and number
    it.

    It is advised to use one of the wrapper functions:
        o run_numerotator - fasta file or sequence list in. Automated multiprocessing for large jobs.
        o number          - single sequence in, numbering out

    @param sequences: A list or tuple of (Id, Sequence) pairs
                              e.g. [ ("seq1","EVQLQQSGAEVVRSG ..."),
                                     ("seq2","DIVMTQSQKFMSTSV ...") ]
    @param reference_file: A reference catalog to use instead of the packaged IMGT references.
    @param blacklist_file: Identifiers of references that should not be used.

    @return: List in the same order as the input sequences. Each entry is a NumberingResult (reference identifier,
             alignment score, regions and numbering) or None if the sequence could not be numbered.
    """
    references = get_reference_sequences(reference_file, blacklist_file)
    aligner = get_aligner()

    results = []
    for name, sequence in sequences:
        try:
            reference, alignment = find_best_reference(sequence, references, aligner, name)
            regions, numbering = number_alignment(reference, alignment)
        except NumberingError as e:
            log.error("Could not number sequence %s: %s", name, e)
            results.append(None)
            continue
        results.append(NumberingResult(reference.identifier, alignment.score, regions, numbering))
    return results


# Wrapper to run numerotator using multiple processes and automate fasta file reading.
def run_numerotator(seq, ncpu=1, **kwargs):
    '''
    Run the numbering protocol for single or multiple sequences.

    @param seq:       A list or tuple of (Id, Sequence) pairs, a path to a fasta file or a single sequence string.
    @param ncpu:      The number of processes to use.
    @param reference_file: A reference catalog to use instead of the packaged IMGT references.
    @param blacklist_file: Identifiers of references that should not be used.
    @param output:    Boolean flag to say whether the result should be output.
    @param outfile:   The name of the file to output to. If output is True and outfile is None then output is printed
                      to stdout.
    @param csv:       Boolean flag to say whether the csv format or the fasta annotation format should be used.
    @param annotate_regions: Write a record for each region in the fasta output.
    @param number_residues:  Write a record for each numbered residue in the fasta output. Default True.

    @return: Two lists. Sequences and Results in the same order.
               o Sequences: The list of sequences formatted as [(Id,sequence), ...].
               o Results: NumberingResult for each sequence or None if it could not be numbered.
    '''
    # Parse the input sequence or fasta file.
    if isinstance(seq, list) or isinstance(seq, tuple): # A list (or tuple) of (name,sequence) sequences
        assert all(len(_) == 2 for _ in seq), "If list or tuple supplied as input format must be [ ('ID1','seq1'), ('ID2', 'seq2'), ... ]"
        sequences = seq
    elif os.path.isfile(seq): # Fasta file.
        sequences = read_sequences(seq)
        ncpu = int(max(1, ncpu))
    elif isinstance(seq, str): # Single sequence
        validate_sequence(seq)
        ncpu = 1
        sequences = [["Input sequence", seq]]

    # Handle the output arguments. These are not passed on to the workers.
    output = kwargs.pop('output', False)
    outfile = kwargs.pop('outfile', None)
    csv = kwargs.pop('csv', False)
    annotate_regions = kwargs.pop('annotate_regions', False)
    number_residues = kwargs.pop('number_residues', True)
    if csv: # Check output arguments before doing work.
        assert outfile, 'If csv output is True then an outfile must be specified'
        _path, _ = os.path.split(outfile)
        assert (not _path) or os.path.exists(_path), 'Output directory %s does not exist' % _path

    if not sequences:
        return sequences, []

    # Workers load the references themselves from the file names.
    numerotator_partial = partial(numerotator, **kwargs)
    chunksize = math.ceil(float(len(sequences)) / ncpu)

    if ncpu > 1:
        pool = Pool(ncpu)
        results = pool.map_async(numerotator_partial, grouper(chunksize, sequences)).get()
        pool.close()
    else:
        results = list(map(numerotator_partial, grouper(chunksize, sequences)))

    # Flatten the chunks.
    results = sum(results, [])

    # Output if necessary
    if output:
        if csv:
            csv_output(sequences, results, outfile)
        else:
            outto, close = sys.stdout, False
            if outfile:
                outto, close = open(outfile, 'w'), True
            write_results(sequences, results, outto, annotate_regions=annotate_regions, number_residues=number_residues)
            if close:
                outto.close()

    return sequences, results


# Wrapper function for simple sequence in numbering out behaviour.
def number(sequence, reference_file=None, blacklist_file=None):
    """
    Given a sequence string, number it with the IMGT scheme.

    For multiple sequences it is advised to use run_numerotator instead of iterative use of this function.

    @param sequence: An amino acid sequence string

    @return: If the sequence can be numbered, a list of (IMGT label, amino acid) pairs and the identifier of the
             reference it was numbered with. Otherwise both are False.
    """
    validate_sequence(sequence)

    result = numerotator([("sequence_0", sequence)], reference_file=reference_file, blacklist_file=blacklist_file)[0]
    if result is None:
        return False, False
    return [(label, sequence[position]) for position, label in result.numbering], result.reference


###########################
# Writing the annotations #
###########################

def apply_annotation(record, start, end, name):
    """
    Create a new record for the subsequence [start, end) of a record.

    @param record: A Bio.SeqRecord.SeqRecord
    @param start: Python start index of the annotation
    @param end: Python end index of the annotation
    @param name: Name of the annotation e.g. CDR3-IMGT or 111.1

    @return: SeqRecord with id <name>_<record id>
    """
    return SeqRecord(record.seq[start:end],
                     id="%s_%s" % (name, record.id),
                     description="IMGT Number %s on %s|%d|%d" % (name, record.id, start, end))


def write_annotations(record, annotations, handle):
    """
    Write the annotations of a record to an open file in fasta format.

    @param annotations: Iterable of (start, end, name). Regions can be given directly.
    """
    return SeqIO.write((apply_annotation(record, start, end, name) for start, end, name in annotations), handle, "fasta")


def write_results(sequences, results, handle, annotate_regions=False, number_residues=True):
    """
    Write the regions and/or the numbered residues of each numbered sequence in fasta format.

    Sequences that could not be numbered are not written.
    """
    for (name, sequence), result in zip(sequences, results):
        if result is None:
            continue
        record = SeqRecord(Seq(sequence), id=str(name), description="")
        if annotate_regions:
            write_annotations(record, result.regions, handle)
        if number_residues:
            write_annotations(record, ((p, p+1, label) for p, label in result.numbering), handle)


def _label_index(label):
    return int(label.split(".")[0])


def csv_output(sequences, results, outfile):
    '''
    Write numbered sequences to a csv file.

    The sequences will written aligned to the numbering scheme. Positions a sequence does not have are written as a '-'

    @param sequences: List of name, sequence tuples
    @param results: Results in the same order as the sequences list. (see numerotator)
    @param outfile: The file path of the csv file to write.
    '''
    pos_ranks = {}

    # Find how to order the numbering. i.e. is it A B C or C B A (e.g. imgt 111 and 112 repectively)
    for result in results:
        if result is None: continue
        l = -1
        r = 0
        for _, label in result.numbering:
            index = _label_index(label)
            if index != l:
                l = index
                r = 0
            else:
                r += 1
            pos_ranks[label] = max(r, pos_ranks.get(label, r))

    # Sort the positions by index and insertion order
    positions = sorted(pos_ranks, key=lambda label: (_label_index(label), pos_ranks[label], label))

    with open(outfile, 'w') as out:
        # Header line
        fields = ['Id', 'reference', 'score', 'seqstart_index', 'seqend_index'] + positions
        print(','.join(fields), file=out)

        for (name, sequence), result in zip(sequences, results):
            if result is None: continue
            line = [str(name).replace(',', ' '),
                    result.reference,
                    str(result.score),
                    str(result.regions[0].start),
                    str(result.regions[-1].end)]

            d = dict((label, sequence[p]) for p, label in result.numbering)
            line += [d.get(label, '-') for label in positions]

            assert len(line) == len(fields)
            print(','.join(line), file=out)
