"""
Combine FAIRe sample and experiment run metadata into the MDT Samples sheet.
"""

from .errors import JoinIntegrityError
from .headers import ID_COLUMN

ASSAY_COLUMN = 'assay_name'
RUN_COLUMN = 'seq_run_id'


def fill_run_constants(runs, assay_name, seq_run_id):
    """
    Fill assay_name and seq_run_id when the run sheet leaves them empty.

    A column that is absent or entirely missing is set to the configured value
    on every row. Partly filled columns are left as they are.
    """
    runs = runs.copy()
    for column, value in ((ASSAY_COLUMN, assay_name), (RUN_COLUMN, seq_run_id)):
        if column not in runs.columns or runs[column].isna().all():
            print(f"Filling empty '{column}' in experimentRunMetadata with '{value}'")
            runs[column] = value
    return runs


def select_assay_runs(runs, assay_name, seq_run_id):
    """
    Keep run rows that belong to the configured assay and sequencing run.

    Matching is a case-insensitive substring match, so 'MiFish' selects
    'MiFish-U' rows. Only needed for workbooks that hold several assays or runs.
    """
    assay_match = runs[ASSAY_COLUMN].astype(str).str.contains(assay_name, case=False, regex=False)
    run_match = runs[RUN_COLUMN].astype(str).str.contains(seq_run_id, case=False, regex=False)
    selected = runs[assay_match & run_match].reset_index(drop=True)
    print(f"Selected {len(selected)} of {len(runs)} experiment runs for assay '{assay_name}' and run '{seq_run_id}'")
    return selected


def check_single_value(merged, column):
    values = merged[column].unique()
    if len(values) != 1:
        raise JoinIntegrityError(
            f"Samples span {len(values)} values of '{column}' ({', '.join(map(str, values))}); "
            f"the configured assay and sequencing run must identify a single {column}"
        )


def join_samples_and_runs(samples, runs):
    """
    Inner join sample metadata with run metadata on 'id'.

    Samples without a run are dropped. The sample sheet's assay_name is
    discarded in favour of the run sheet's, and any other column present in
    both sheets is also taken from the run sheet. After the join, assay_name
    and seq_run_id must each hold a single value; assay_name is then dropped
    since an MDT dataset covers one assay.

    Args:
        samples (pd.DataFrame): Normalised sample table
        runs (pd.DataFrame): Normalised run table with assay_name and seq_run_id

    Returns:
        pd.DataFrame: One row per matched run, sample columns first

    Raises:
        JoinIntegrityError: If nothing matches, sample ids repeat, or several
            assays or runs remain
    """
    run_ids = set(runs[ID_COLUMN].dropna())
    matched = samples[samples[ID_COLUMN].isin(run_ids)]
    unmatched = len(samples) - len(matched)
    if unmatched:
        print(f"Warning: {unmatched} sample(s) in sampleMetadata have no experiment run and were dropped")

    duplicated = matched[ID_COLUMN][matched[ID_COLUMN].duplicated()].unique()
    if len(duplicated):
        raise JoinIntegrityError(
            f"Sample id(s) repeated in sampleMetadata: {', '.join(map(str, duplicated))}"
        )

    matched = matched.drop(columns=[ASSAY_COLUMN], errors='ignore')
    overlap = [c for c in matched.columns if c != ID_COLUMN and c in runs.columns]
    if overlap:
        print(f"Warning: column(s) {', '.join(overlap)} found in both sampleMetadata and "
              f"experimentRunMetadata; using the experimentRunMetadata values")
        matched = matched.drop(columns=overlap)

    merged = matched.merge(runs, how='inner', on=ID_COLUMN)
    if merged.empty:
        raise JoinIntegrityError(
            "No sample in sampleMetadata matches a samp_name in experimentRunMetadata"
        )

    check_single_value(merged, ASSAY_COLUMN)
    check_single_value(merged, RUN_COLUMN)
    return merged.drop(columns=[ASSAY_COLUMN])
