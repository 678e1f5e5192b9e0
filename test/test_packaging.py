import os
import glob

import numerotator

package_path = os.path.dirname(numerotator.__file__)
root_path = os.path.join(os.path.dirname(__file__), "..")


def test_source_headers():
    for filename in glob.glob(os.path.join(package_path, "*.py")):
        with open(filename) as handle:
            header = [next(handle) for _ in range(2)]
        assert header[0].startswith("#    numerotator - IMGT Numbering"), filename
        assert "The numerotator developers" in header[1], filename


def test_readme_describes_full_catalog():
    with open(os.path.join(root_path, "README.md")) as handle:
        readme = handle.read()
    assert "build_pipeline/FormatReferences.py" in readme
    assert "--reference_file" in readme
