import numpy as np
import pandas as pd
import pytest

from faire2mdt.errors import JoinIntegrityError
from faire2mdt.headers import normalize_run_table, normalize_sample_table
from faire2mdt.join import fill_run_constants, join_samples_and_runs, select_assay_runs


@pytest.fixture
def samples(sample_rows):
    return normalize_sample_table(pd.DataFrame(sample_rows))


@pytest.fixture
def runs(run_rows):
    return fill_run_constants(normalize_run_table(pd.DataFrame(run_rows)), 'MiFish-U', 'OcOm_1901')


def test_fill_run_constants_fills_empty_columns(run_rows):
    runs = fill_run_constants(normalize_run_table(pd.DataFrame(run_rows)), 'MiFish-U', 'OcOm_1901')

    assert runs['assay_name'].tolist() == ['MiFish-U'] * 3
    assert runs['seq_run_id'].tolist() == ['OcOm_1901'] * 3


def test_fill_run_constants_adds_absent_columns():
    runs = pd.DataFrame({'id': ['S1', 'S2']})

    filled = fill_run_constants(runs, 'COI', 'RUN_2')

    assert filled['assay_name'].tolist() == ['COI', 'COI']
    assert filled['seq_run_id'].tolist() == ['RUN_2', 'RUN_2']
    assert list(runs.columns) == ['id']


def test_fill_run_constants_keeps_partly_filled_columns():
    runs = pd.DataFrame({'id': ['S1', 'S2'], 'assay_name': ['COI', np.nan], 'seq_run_id': ['R1', 'R1']})

    filled = fill_run_constants(runs, 'MiFish-U', 'OcOm_1901')

    assert filled['assay_name'].tolist()[0] == 'COI'
    assert pd.isna(filled['assay_name'].tolist()[1])
    assert filled['seq_run_id'].tolist() == ['R1', 'R1']


def test_join_keeps_only_samples_with_runs(samples, runs):
    merged = join_samples_and_runs(samples, runs)

    assert merged['id'].tolist() == ['S1', 'S2', 'S3']
    assert list(merged.columns) == ['id', 'samp_category', 'depth', 'notes',
                                    'seq_run_id', 'lib_id', 'input_read_count']
    assert len(merged) <= len(runs)
    assert set(merged['id']) <= set(samples['id']) & set(runs['id'])


def test_join_drops_assay_name(samples, runs):
    assert 'assay_name' not in join_samples_and_runs(samples, runs).columns


def test_join_two_assays_fails(samples, runs):
    runs.loc[1, 'assay_name'] = 'COI'
    with pytest.raises(JoinIntegrityError, match="2 values of 'assay_name'"):
        join_samples_and_runs(samples, runs)


def test_join_two_runs_fails(samples, runs):
    runs.loc[2, 'seq_run_id'] = 'OcOm_1902'
    with pytest.raises(JoinIntegrityError, match="2 values of 'seq_run_id'"):
        join_samples_and_runs(samples, runs)


def test_join_without_matches_fails(samples, runs):
    runs['id'] = ['X1', 'X2', 'X3']
    with pytest.raises(JoinIntegrityError, match='No sample'):
        join_samples_and_runs(samples, runs)


def test_join_repeated_sample_id_fails(samples, runs):
    samples = pd.concat([samples, samples.iloc[[0]]], ignore_index=True)
    with pytest.raises(JoinIntegrityError, match='repeated'):
        join_samples_and_runs(samples, runs)


def test_join_column_collision_uses_run_values(samples, runs):
    samples['lib_id'] = ['sample_lib'] * len(samples)

    merged = join_samples_and_runs(samples, runs)

    assert merged['lib_id'].tolist() == ['S1_lib', 'S2_lib', 'S3_lib']
    assert list(merged.columns).count('lib_id') == 1


def test_join_ignores_missing_ids(samples, runs):
    runs = pd.concat([runs, pd.DataFrame({'id': [np.nan], 'assay_name': ['MiFish-U'],
                                          'seq_run_id': ['OcOm_1901']})], ignore_index=True)
    samples = pd.concat([samples, pd.DataFrame({'id': [np.nan]})], ignore_index=True)

    merged = join_samples_and_runs(samples, runs)

    assert merged['id'].tolist() == ['S1', 'S2', 'S3']


def test_select_assay_runs():
    runs = pd.DataFrame({
        'id': ['S1', 'S1', 'S2'],
        'assay_name': ['MiFish-U', 'COI', 'mifish-u'],
        'seq_run_id': ['OcOm_1901', 'OcOm_1901', 'OcOm_1901'],
    })

    selected = select_assay_runs(runs, 'MiFish-U', 'OcOm_1901')

    assert selected['id'].tolist() == ['S1', 'S2']
