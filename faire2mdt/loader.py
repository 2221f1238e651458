"""
Read the five FAIRe sheets needed for an MDT submission from one workbook.
"""

import os
from collections import namedtuple

import pandas as pd

from .errors import LoadError

PROJECT_SHEET = 'projectMetadata'
SAMPLE_SHEET = 'sampleMetadata'
RUN_SHEET = 'experimentRunMetadata'
OTU_SHEET = 'otuFinal'
TAXA_SHEET = 'taxaFinal'

# Project and OTU sheets start with their header row. The other sheets carry
# FAIRe requirement/description rows above the real header, so they are read
# raw and the header is located later by content.
SHEET_HEADERS = {
    PROJECT_SHEET: 0,
    SAMPLE_SHEET: None,
    RUN_SHEET: None,
    OTU_SHEET: 0,
    TAXA_SHEET: None,
}

FAIReTables = namedtuple('FAIReTables', ['project', 'samples', 'runs', 'otu', 'taxa'])


def read_sheet(workbook, sheet_name, header, workbook_path):
    """
    Read one sheet from an open workbook.

    Args:
        workbook (pd.ExcelFile): Open FAIRe workbook
        sheet_name (str): Name of the sheet to read
        header (int or None): Row to use as header, None to read every row as data
        workbook_path (str): Path of the workbook, used in error messages

    Returns:
        pd.DataFrame: The sheet contents in row and column order
    """
    if sheet_name not in workbook.sheet_names:
        raise LoadError(
            f"Sheet '{sheet_name}' not found in {workbook_path}. "
            f"Available sheets: {', '.join(workbook.sheet_names)}"
        )
    try:
        df = workbook.parse(sheet_name, header=header)
    except Exception as e:
        raise LoadError(f"Could not read sheet '{sheet_name}' from {workbook_path}: {e}") from e

    if df.empty:
        raise LoadError(f"Sheet '{sheet_name}' in {workbook_path} is empty")
    return df


def load_faire_workbook(workbook_path):
    """
    Load the project, sample, run, OTU and taxonomy sheets of a FAIRe workbook.

    Args:
        workbook_path (str): Path to the FAIRe metadata Excel file (.xlsx)

    Returns:
        FAIReTables: The five sheets as DataFrames

    Raises:
        LoadError: If the workbook or any of the sheets is missing, unreadable or empty
    """
    if not os.path.exists(workbook_path):
        raise LoadError(f"File not found: {workbook_path}")

    print(f"\nReading FAIRe metadata from: {workbook_path}")
    try:
        workbook = pd.ExcelFile(workbook_path, engine='openpyxl')
    except Exception as e:
        raise LoadError(f"Could not read Excel file {workbook_path}: {e}") from e

    with workbook:
        tables = {}
        for sheet_name, header in SHEET_HEADERS.items():
            tables[sheet_name] = read_sheet(workbook, sheet_name, header, workbook_path)
            print(f"  {sheet_name}: {tables[sheet_name].shape[0]} rows x {tables[sheet_name].shape[1]} columns")

    return FAIReTables(
        project=tables[PROJECT_SHEET],
        samples=tables[SAMPLE_SHEET],
        runs=tables[RUN_SHEET],
        otu=tables[OTU_SHEET],
        taxa=tables[TAXA_SHEET],
    )
