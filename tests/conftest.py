import numpy as np
import pandas as pd
import pytest

from faire2mdt.config import ConversionSettings

TAXA_HEADER = [
    'seq_id', 'dna_sequence', 'domain', 'kingdom', 'phylum', 'class', 'order',
    'family', 'genus', 'specificEpithet', 'scientificName', 'taxonRank',
    'verbatimIdentification', 'accepted_id', 'accepted_id_name', 'percent_match',
    'percent_query_cover', 'confidence_score', 'tax_assign_cat', 'notes',
    'empty_col', 'ASV_length', 'length_check'
]


def write_raw_sheet(writer, sheet_name, rows):
    pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, index=False, header=False)


@pytest.fixture
def settings(tmp_path):
    return ConversionSettings(
        assay_name='MiFish-U',
        seq_run_id='OcOm_1901',
        faire_metadata=str(tmp_path / 'faire.xlsx'),
        output_dir=str(tmp_path / 'out'),
    )


@pytest.fixture
def project_sheet():
    return pd.DataFrame({
        'requirement_level_code': ['M', 'M', 'M', 'M', 'O', 'O'],
        'section': ['project', 'project', 'assay', 'assay', 'assay', 'project'],
        'term_name': ['project_id', 'project_name', 'assay_name', 'pcr_primer_forward',
                      'assay_type', 'mod_date'],
        'project_level': ['RS19', 'IOT eDNA', np.nan, np.nan, 'metabarcoding', np.nan],
        'MiFish-U': [np.nan, np.nan, 'MiFish-U', 'GTCGGTAAAACTCGTGCCAGC', np.nan, np.nan],
        'COI': [np.nan, np.nan, 'COI', 'GGWACWGGWTGAACWGTWTAYCCYCC', np.nan, np.nan],
    })


@pytest.fixture
def sample_rows():
    return [
        ['# requirement_level_code', 'M', 'M', 'O', 'O'],
        ['# section', 'sample', 'sample', 'sample', 'sample'],
        ['samp_name', 'samp_category', 'assay_name', 'depth', 'notes'],
        ['S1', 'sample', 'MiFish-U', 5, np.nan],
        ['S2', 'sample', 'MiFish-U', 10, np.nan],
        ['S3', 'negative control', 'MiFish-U', 0, np.nan],
        ['S4', 'sample', 'MiFish-U', 20, np.nan],
    ]


@pytest.fixture
def run_rows():
    return [
        ['# requirement_level_code', 'M', 'M', 'M', 'O'],
        ['samp_name', 'assay_name', 'seq_run_id', 'lib_id', 'input_read_count'],
        ['S1', np.nan, np.nan, 'S1_lib', 1000],
        ['S2', np.nan, np.nan, 'S2_lib', 2000],
        ['S3', np.nan, np.nan, 'S3_lib', 50],
    ]


@pytest.fixture
def otu_sheet():
    return pd.DataFrame(
        {'S1': [10, 0], 'S2': [3, 7], 'S3': [0, 1]},
        index=['ASV_1', 'ASV_2']
    )


@pytest.fixture
def taxa_rows():
    def taxon(seq_id, genus, species):
        row = [seq_id, 'ACGT', 'Eukaryota', 'Animalia', 'Chordata', 'Actinopteri',
               'Perciformes', 'Labridae', genus, species, f'{genus} {species}',
               'species', f'{genus} {species}', 123, f'{genus} {species}', 99.5,
               100, 0.98, 'species', 'none', np.nan, 172, 'ok']
        return row
    return [
        ['# requirement_level_code'] + ['O'] * (len(TAXA_HEADER) - 1),
        ['# section'] + ['taxonomy'] * (len(TAXA_HEADER) - 1),
        TAXA_HEADER,
        taxon('ASV_1', 'Thalassoma', 'lunare'),
        taxon('ASV_2', 'Labroides', 'dimidiatus'),
    ]


@pytest.fixture
def faire_workbook(settings, project_sheet, sample_rows, run_rows, otu_sheet, taxa_rows):
    path = settings.faire_metadata
    with pd.ExcelWriter(path, engine='openpyxl') as writer:
        project_sheet.to_excel(writer, sheet_name='projectMetadata', index=False)
        write_raw_sheet(writer, 'sampleMetadata', sample_rows)
        write_raw_sheet(writer, 'experimentRunMetadata', run_rows)
        otu_sheet.to_excel(writer, sheet_name='otuFinal', index=True)
        write_raw_sheet(writer, 'taxaFinal', taxa_rows)
    return path
