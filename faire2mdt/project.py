"""
Reshape the FAIRe project sheet into the MDT Study sheet.

A FAIRe projectMetadata sheet holds project level values in 'value' and, when
a project used several assays, one extra column per assay. MDT expects one
submission per assay, so the assay's column is folded into 'value' and the
other assay columns are dropped.
"""

import pandas as pd

from .errors import AssayLookupError

TERM_COLUMN = 'term'
VALUE_COLUMN = 'value'
PROJECT_ID_TERM = 'project_id'
ASSAY_NAME_TERM = 'assay_name'


def override_project_id(project, project_id):
    """
    Replace the recorded project identifier with the sequencing run label.

    OceanOmics submits each assay/run under its run code (e.g. RS19 becomes
    OcOm_1901), so the project_id term always carries the configured run id.
    """
    project = project.copy()
    project[VALUE_COLUMN] = project[VALUE_COLUMN].astype(object)
    project.loc[project[TERM_COLUMN] == PROJECT_ID_TERM, VALUE_COLUMN] = project_id
    return project


def build_assay_column_map(project):
    """
    Map each assay name to the column holding that assay's values.

    The assay names are read from the 'assay_name' row of the columns to the
    right of 'term' and 'value'. If an assay name appears in more than one
    column the first column wins.

    Args:
        project (pd.DataFrame): Normalised project table in wide form

    Returns:
        dict: assay name -> column name
    """
    assay_columns = [c for c in project.columns if c not in (TERM_COLUMN, VALUE_COLUMN)]
    assay_rows = project.index[project[TERM_COLUMN] == ASSAY_NAME_TERM]
    if len(assay_rows) == 0:
        return {}

    assay_row = project.loc[assay_rows[0], assay_columns]
    column_map = {}
    for column, assay in assay_row.items():
        if pd.isna(assay):
            continue
        column_map.setdefault(str(assay).strip(), column)
    return column_map


def collapse_assay_columns(project, assay_name):
    """
    Fold the configured assay's column into 'value' and drop the assay columns.

    Args:
        project (pd.DataFrame): Normalised project table in wide form
        assay_name (str): Assay to keep

    Returns:
        pd.DataFrame: Two column (term, value) table

    Raises:
        AssayLookupError: If no assay column is labelled with assay_name
    """
    column_map = build_assay_column_map(project)
    if assay_name not in column_map:
        raise AssayLookupError(
            f"Assay '{assay_name}' not found in the '{ASSAY_NAME_TERM}' row of projectMetadata. "
            f"Assays found: {list(column_map) or 'none'}"
        )
    assay_column = column_map[assay_name]
    print(f"Using project values from assay column '{assay_column}'")

    project = project.copy()
    project[VALUE_COLUMN] = project[VALUE_COLUMN].astype(object)
    project[VALUE_COLUMN] = project[VALUE_COLUMN].where(project[VALUE_COLUMN].notna(), project[assay_column])
    project.loc[project[TERM_COLUMN] == ASSAY_NAME_TERM, VALUE_COLUMN] = assay_name
    return project[[TERM_COLUMN, VALUE_COLUMN]]


def reshape_project_table(project, settings):
    """
    Produce the MDT Study table from a normalised project table.

    Args:
        project (pd.DataFrame): Output of normalize_project_table
        settings (ConversionSettings): Settings of this run

    Returns:
        pd.DataFrame: (term, value) rows with no missing values
    """
    project = override_project_id(project, settings.project_id)
    if project.shape[1] > 2:
        project = collapse_assay_columns(project, settings.assay_name)
    project = project[project[VALUE_COLUMN].notna()]
    return project.reset_index(drop=True)
