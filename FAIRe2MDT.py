#!/usr/bin/env python3
"""
FAIRe2MDT main entry point

This script converts metabarcoding data in the FAIRe format for submission to
GBIF via the Metabarcoding Data Toolkit (MDT) (https://www.gbif.org/metabarcoding).

For projects with several assays or sequencing runs, run the script once per
assay/run. The output is an Excel file named
<project_id>_<assay_name>_<seq_run_id>_MDTfmt.xlsx with the sheets Study,
Samples, Taxonomy and OTU_table.
"""

import sys

from faire2mdt.cli import main


if __name__ == '__main__':
    sys.exit(main())
