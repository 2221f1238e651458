"""
Exceptions raised while converting a FAIRe workbook to the MDT format.

Every fatal condition in the pipeline raises a subclass of FAIRe2MDTError.
Nothing in the library catches these; the command line entry point reports
them and exits.
"""


class FAIRe2MDTError(ValueError):
    """Base class for all conversion errors."""


class ConfigError(FAIRe2MDTError):
    """Configuration file is unreadable or required settings are missing."""


class LoadError(FAIRe2MDTError):
    """A required workbook or sheet is missing, empty or unreadable."""


class SchemaMismatchError(FAIRe2MDTError):
    """An anchor value needed to locate a header row was not found."""


class JoinIntegrityError(FAIRe2MDTError):
    """Sample and run metadata do not resolve to exactly one assay and one run."""


class AssayLookupError(FAIRe2MDTError):
    """The configured assay is not one of the project's assay columns."""
