"""Removal of columns that hold no values."""


def empty_columns(df):
    """Names of the columns in which every value is missing, in column order."""
    return [column for column in df.columns if df[column].isna().all()]


def drop_empty_cols(df):
    return df.drop(columns=empty_columns(df))
