"""
Header normalisation for FAIRe sheets.

FAIRe sample, experiment run and taxonomy sheets carry requirement level and
description rows above the real header row. The header row is found by
content (the row whose first cell holds the anchor term), promoted to column
names, and the identifier column is renamed to the MDT 'id'.
"""

import pandas as pd

from .errors import SchemaMismatchError

SAMPLE_ANCHOR = 'samp_name'
TAXA_ANCHOR = 'seq_id'
PROJECT_ANCHOR = 'term_name'
PROJECT_VALUE_COLUMN = 'project_level'

ID_COLUMN = 'id'
OTU_INDEX_NAME = 'seq_id'


def _cell_text(value):
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return str(value).strip()


def find_anchor_row(values, anchor, table_name):
    """
    Return the position of the first value equal to the anchor.

    Args:
        values (iterable): Cells to scan in order (a column, or a list of headers)
        anchor (str): Value marking the header row
        table_name (str): Name of the table, used in the error message

    Returns:
        int: 0-based position of the first match

    Raises:
        SchemaMismatchError: If the anchor does not occur
    """
    seen = []
    for position, value in enumerate(values):
        text = _cell_text(value)
        if text == anchor:
            return position
        if text is not None and len(seen) < 5:
            seen.append(text)
    raise SchemaMismatchError(
        f"'{anchor}' not found in {table_name}; cannot locate the header row. "
        f"First values found instead: {seen or 'none'}"
    )


def header_names(row):
    """
    Turn a row of cells into unique column names.

    Blank cells become '...N' (N being the 1-based column number) and repeated
    names get the same suffix, so every column can be addressed by name.
    """
    names = []
    for position, value in enumerate(row, start=1):
        name = _cell_text(value)
        if not name:
            name = f"...{position}"
        elif name in names:
            name = f"{name}...{position}"
        names.append(name)
    return names


def promote_header_row(df, anchor, table_name, id_column=ID_COLUMN):
    """
    Use the row holding the anchor in the first column as the header.

    Rows above the anchor row are dropped, the anchor row becomes the column
    names and is removed from the data, and the first column is renamed to
    id_column.

    Args:
        df (pd.DataFrame): Sheet read without a header
        anchor (str): Value marking the header row
        table_name (str): Name of the sheet, used in error messages
        id_column (str): New name of the anchor column

    Returns:
        pd.DataFrame: The table with its real header
    """
    row = find_anchor_row(df.iloc[:, 0], anchor, table_name)
    names = header_names(df.iloc[row])
    names[0] = id_column

    body = df.iloc[row + 1:].copy()
    body.columns = names
    return body.reset_index(drop=True).infer_objects()


def drop_positional_columns(df, positions, table_name):
    """
    Drop columns by their 1-based spreadsheet position.

    Args:
        df (pd.DataFrame): Sheet read without a header
        positions (tuple): 1-based column numbers to drop
        table_name (str): Name of the sheet, used in error messages

    Returns:
        pd.DataFrame: The table without those columns
    """
    if not positions:
        return df
    out_of_range = [p for p in positions if p > df.shape[1]]
    if out_of_range:
        raise SchemaMismatchError(
            f"{table_name} has {df.shape[1]} columns; cannot drop column(s) "
            f"{', '.join(str(p) for p in out_of_range)}"
        )
    return df.drop(columns=[df.columns[p - 1] for p in sorted(set(positions))])


def normalize_sample_table(df, table_name='sampleMetadata'):
    return promote_header_row(df, SAMPLE_ANCHOR, table_name)


def normalize_run_table(df, table_name='experimentRunMetadata'):
    return promote_header_row(df, SAMPLE_ANCHOR, table_name)


def normalize_taxa_table(df, drop_columns=(), table_name='taxaFinal'):
    """Drop the diagnostic columns, then promote the 'seq_id' row to header."""
    df = drop_positional_columns(df, drop_columns, table_name)
    return promote_header_row(df, TAXA_ANCHOR, table_name)


def normalize_project_table(df, table_name='projectMetadata'):
    """
    Trim the project sheet to the term column onwards.

    Columns left of 'term_name' (requirement level, section, ...) are dropped,
    'term_name' becomes 'term' and 'project_level' becomes 'value'. Any assay
    columns to the right are kept for reshaping.
    """
    start = find_anchor_row(df.columns, PROJECT_ANCHOR, table_name)
    project = df.iloc[:, start:].copy()
    project.columns = [_cell_text(c) or c for c in project.columns]

    if PROJECT_VALUE_COLUMN not in project.columns:
        raise SchemaMismatchError(
            f"'{PROJECT_VALUE_COLUMN}' column not found in {table_name}. "
            f"Columns found: {list(project.columns)}"
        )
    project = project.rename(columns={PROJECT_ANCHOR: 'term', PROJECT_VALUE_COLUMN: 'value'})
    return project.reset_index(drop=True)


def index_otu_table(df):
    """Move the first (feature id) column of the OTU table into the row index."""
    otu = df.rename(columns={df.columns[0]: OTU_INDEX_NAME})
    return otu.set_index(OTU_INDEX_NAME)
