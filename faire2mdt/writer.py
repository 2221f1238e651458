"""
Write the MDT workbook.

The Metabarcoding Data Toolkit expects exactly four sheets, in this order:
Study, Samples, Taxonomy and OTU_table.
"""

import os

import pandas as pd

OUTPUT_EXTENSION = 'xlsx'
OUTPUT_SUFFIX = 'MDTfmt'

STUDY_SHEET = 'Study'
SAMPLES_SHEET = 'Samples'
TAXONOMY_SHEET = 'Taxonomy'
OTU_TABLE_SHEET = 'OTU_table'


def output_filename(settings):
    """
    Name of the MDT workbook for a run.

    Args:
        settings (ConversionSettings): Settings of this run

    Returns:
        str: '<project_id>_<assay_name>_<seq_run_id>_MDTfmt.xlsx'
    """
    return f"{settings.project_id}_{settings.assay_name}_{settings.seq_run_id}_{OUTPUT_SUFFIX}.{OUTPUT_EXTENSION}"


def output_path(settings):
    return os.path.join(settings.output_dir, output_filename(settings))


def write_mdt_workbook(study, samples, taxonomy, otu, path):
    """
    Write the four MDT sheets to path, replacing any existing file.

    The workbook is written to a temporary file next to path and moved into
    place once complete, so a failed write never leaves a partial workbook.

    Args:
        study (pd.DataFrame): (term, value) project table
        samples (pd.DataFrame): Joined sample and run metadata
        taxonomy (pd.DataFrame): Taxonomy table
        otu (pd.DataFrame): OTU abundance table indexed by feature id
        path (str): Output workbook path

    Returns:
        str: The path written
    """
    out_dir = os.path.dirname(os.path.abspath(path))
    os.makedirs(out_dir, exist_ok=True)

    # opened by the Excel writer, so the file mode follows the umask
    root, ext = os.path.splitext(path)
    tmp_path = f"{root}.tmp{ext}"
    try:
        with pd.ExcelWriter(tmp_path, engine='openpyxl') as writer:
            study.to_excel(writer, sheet_name=STUDY_SHEET, index=False)
            samples.to_excel(writer, sheet_name=SAMPLES_SHEET, index=False)
            taxonomy.to_excel(writer, sheet_name=TAXONOMY_SHEET, index=False)
            otu.to_excel(writer, sheet_name=OTU_TABLE_SHEET, index=True)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    print(f"MDT workbook written to: {path}")
    return path
