
# N.B. The packaged reference catalog is a small sample (three usable germlines). For the full catalog run
# build_pipeline/FormatReferences.py on ANARCI's curated alignment (curated_alignments/ALL.stockholm) and pass the
# result as reference_file=... (see README.md).

# Import the numerotator function.
from numerotator import run_numerotator

# Format the sequences that we want to number.
sequences = [ ("1-18:H","QVQLVQSGAEVKKPGASVKVSCKASGYTFTSYGISWVRQAPGQGLEWMGWISAYNGNTNYAQKLQGRVTMTTDTSTSTAYMELRSLRSDDTAVYYCARMDVWGQGTTVTVSS"),
              ("1-39:K","DIQMTQSPSSLSASVGDRVTITCRASQSISSYLNWYQQKPGKAPKLLIYAASSLQSGVPSRFSGSGSGTDFTLTISSLQPEDFATYYCQQSYSTPWTFGQGTKVEIK"),
              ("lysozyme:A","KVFGRCELAAAMKRHGLDNYRGYSLGNWVCAAKFESNFNTQATNRNTDGSTDYGILQINSRWWCNDGRTPGSRNLCNIPCSALLSSDITASVNCAKKIVSDGNGMNAWVAWRNRCKGTDVQAWIRGCRL")]

# Hand the list of sequences to run_numerotator. Use two processes.
sequences, results = run_numerotator(sequences, ncpu=2)

# There is one result for each sequence submitted
assert len(results) == len(sequences)

print('I am using the run_numerotator function to number the following sequences')
print(sequences)

print('\n')
# Iterate over the sequences
for (name, sequence), result in zip(sequences, results):
    if result is None:
        print('numerotator did not number', name)
    else:
        print('numerotator numbered', name, 'using the reference', result.reference, '(score %s)' % result.score)
        print('These are its regions:')
        for region in result.regions:
            print(region.label, sequence[region.start:region.end])
        print('This is the IMGT numbering:')
        print([(label, sequence[position]) for position, label in result.numbering])
    print('\n', '_'*40)

print('Do with this infomation as you wish')

print('\n', '*'*40)

# Want to just get a quick numbering without caring about the other details?
from numerotator import number

seq = "QVQLQQSGAELARPGASVKMSCKASGYTFTRYTMHWVKQRPGQGLEWIGYINPSRGYTNYNQKFKDKATLTTDKSSSTAYMQLSSLTSEDSAVYYCARYFDYWGQGTTLTVSS"
numbering, reference = number(seq)
print('Alternatively we can simply number a sequence with the number function')
print('I gave it this sequence\n', seq)
print('numerotator numbered it with', reference)
print(numbering)
