"""
FAIRe to MDT conversion pipeline.

load -> normalise headers -> reshape project -> join samples and runs ->
prune empty columns -> write. Every step returns new tables; any error aborts
the run before the output workbook is written.
"""

from collections import namedtuple

from .headers import (
    index_otu_table,
    normalize_project_table,
    normalize_run_table,
    normalize_sample_table,
    normalize_taxa_table,
)
from .join import fill_run_constants, join_samples_and_runs, select_assay_runs
from .loader import load_faire_workbook
from .project import reshape_project_table
from .prune import drop_empty_cols, empty_columns
from .writer import output_path, write_mdt_workbook

MDTTables = namedtuple('MDTTables', ['study', 'samples', 'taxonomy', 'otu'])

ConversionResult = namedtuple('ConversionResult', ['path', 'tables', 'summary'])


def transform_tables(faire, settings):
    """
    Turn the five FAIRe sheets into the four MDT tables.

    Args:
        faire (FAIReTables): Sheets as returned by load_faire_workbook
        settings (ConversionSettings): Settings of this run

    Returns:
        tuple: (MDTTables, summary dict)
    """
    study = reshape_project_table(normalize_project_table(faire.project), settings)

    samples = normalize_sample_table(faire.samples)
    runs = fill_run_constants(normalize_run_table(faire.runs), settings.assay_name, settings.seq_run_id)
    if settings.filter_run_table:
        runs = select_assay_runs(runs, settings.assay_name, settings.seq_run_id)
    merged = join_samples_and_runs(samples, runs)

    taxonomy = normalize_taxa_table(faire.taxa, settings.taxa_drop_columns)
    otu = index_otu_table(faire.otu)

    # experimentRunMetadata is not written on its own; pruned for the summary only
    run_empty = empty_columns(runs)
    summary = {
        'study_terms': len(study),
        'samples': len(merged),
        'samples_without_run': len(samples) - len(merged),
        'run_columns_kept': runs.shape[1] - len(run_empty),
        'run_columns_empty': run_empty,
        'sample_columns_empty': empty_columns(merged),
        'taxa': len(taxonomy),
        'taxa_columns_empty': empty_columns(taxonomy),
        'otu_features': otu.shape[0],
        'otu_samples': otu.shape[1],
    }

    tables = MDTTables(
        study=drop_empty_cols(study),
        samples=drop_empty_cols(merged),
        taxonomy=drop_empty_cols(taxonomy),
        otu=otu,
    )
    return tables, summary


def print_summary(summary):
    print("\n" + "="*50)
    print("CONVERSION SUMMARY")
    print("="*50)
    print(f"Study terms:  {summary['study_terms']}")
    print(f"Samples:      {summary['samples']} "
          f"({summary['samples_without_run']} without an experiment run dropped)")
    print(f"Run columns:  {summary['run_columns_kept']} with values")
    if summary['run_columns_empty']:
        print(f"  Empty run columns: {', '.join(map(str, summary['run_columns_empty']))}")
    if summary['sample_columns_empty']:
        print(f"Empty sample columns removed: {len(summary['sample_columns_empty'])}")
    print(f"Taxa:         {summary['taxa']}")
    if summary['taxa_columns_empty']:
        print(f"Empty taxonomy columns removed: {', '.join(map(str, summary['taxa_columns_empty']))}")
    print(f"OTU table:    {summary['otu_features']} features x {summary['otu_samples']} samples")


def convert(settings):
    """
    Run a full FAIRe to MDT conversion.

    Args:
        settings (ConversionSettings): Settings of this run

    Returns:
        ConversionResult: Path of the written workbook, the tables and a summary
    """
    faire = load_faire_workbook(settings.faire_metadata)
    tables, summary = transform_tables(faire, settings)

    path = output_path(settings)
    print(f"\nWriting MDT workbook: {path}")
    write_mdt_workbook(tables.study, tables.samples, tables.taxonomy, tables.otu, path)
    print_summary(summary)
    return ConversionResult(path=path, tables=tables, summary=summary)
