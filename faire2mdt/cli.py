"""
Command line interface for FAIRe2MDT.
"""

import argparse
import os
import sys

from .config import (
    add_generated_file,
    build_settings,
    get_config_file_path,
    load_config,
    new_run_record,
    save_config,
)
from .converter import convert
from .errors import FAIRe2MDTError


def create_parser():
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="FAIRe2MDT: Convert FAIRe metabarcoding metadata to the GBIF Metabarcoding Data Toolkit (MDT) format.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
The output workbook is named <project_id>_<assay_name>_<seq_run_id>_MDTfmt.xlsx,
where project_id is the sequencing run ID. Projects with several assays or
sequencing runs are converted by running the script once per assay/run.

Examples:
  # Convert one assay
  python FAIRe2MDT.py --FAIReMetadata OcOm_1901_MiFishU_faire_metadata.xlsx --assay_name MiFish-U --seq_run_id OcOm_1901

  # Repeat a previous run from its saved configuration
  python FAIRe2MDT.py --config_file OcOm_1901_MiFish-U_OcOm_1901_MDTfmt_config.yaml
        """
    )

    parser.add_argument('--FAIReMetadata', type=str,
                        help='Path to FAIRe metadata Excel file (.xlsx)')
    parser.add_argument('--assay_name', type=str,
                        help='Assay to convert; must match assay_name in the FAIRe metadata')
    parser.add_argument('--seq_run_id', type=str,
                        help='Sequencing run ID; also used as the project ID of the output')
    parser.add_argument('--output_dir', type=str,
                        help='Directory for the MDT workbook (default: current directory)')
    parser.add_argument('--config_file', type=str,
                        help='Path to YAML configuration file with the settings above (optional)')
    parser.add_argument('--filter_run_table', action='store_true', default=None,
                        help='Only keep experiment runs matching assay_name and seq_run_id (for workbooks with several assays or runs)')
    parser.add_argument('--keep_taxa_columns', action='store_true',
                        help='Do not drop taxaFinal columns 22 and 23 (ASV length columns of OceanOmics exports)')
    parser.add_argument('--no_config_record', action='store_true',
                        help='Do not save the run configuration next to the output workbook')
    return parser


def settings_from_args(args):
    """Build the run settings from parsed arguments and an optional config file."""
    config = load_config(args.config_file) if args.config_file else {}
    return build_settings(
        config,
        faire_metadata=args.FAIReMetadata,
        assay_name=args.assay_name,
        seq_run_id=args.seq_run_id,
        output_dir=args.output_dir,
        filter_run_table=args.filter_run_table,
        taxa_drop_columns=() if args.keep_taxa_columns else None,
        save_config=False if args.no_config_record else None,
    )


def mdt_mode(settings, command=''):
    """
    Convert one assay/run of a FAIRe workbook and record the run.

    Args:
        settings (ConversionSettings): Settings of this run
        command (str): Command line that started the run, saved in the record

    Returns:
        ConversionResult: Result of the conversion
    """
    print("\n" + "="*60)
    print("FAIRE2MDT - MDT MODE")
    print("="*60)
    print(f"Assay: {settings.assay_name}")
    print(f"Sequencing run: {settings.seq_run_id}")

    result = convert(settings)

    if settings.save_config:
        record = new_run_record(settings, command)
        add_generated_file(record, result.path, "MDT workbook (Study, Samples, Taxonomy, OTU_table)")
        config_file_path = get_config_file_path(result.path)
        add_generated_file(record, config_file_path, "Configuration file for this run")
        save_config(record, config_file_path)
    return result


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings_from_args(args)
    except FAIRe2MDTError as e:
        parser.error(str(e))

    if not os.path.exists(settings.faire_metadata):
        parser.error(f"File not found: {settings.faire_metadata}")

    command = ' '.join(['FAIRe2MDT.py'] + list(sys.argv[1:] if argv is None else argv))
    try:
        mdt_mode(settings, command)
    except (FAIRe2MDTError, OSError) as e:
        print(f"\nError: {e}")
        print("No MDT workbook was written.")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
