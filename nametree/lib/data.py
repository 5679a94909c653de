"""Data loading utilities for name tables."""

import logging

import polars as pl

from nametree.lib.name_tree import Node, new

logger = logging.getLogger(__name__)


def get_df_polars(filename: str) -> pl.DataFrame:
    """
    Load a name table from a CSV file using polars.

    Parameters
    ----------
    filename : str
        Path to the CSV file with ';' separator (format: name;entry)

    Returns
    -------
    polars.DataFrame
        DataFrame with columns: name, entry, depth
    """
    # Both columns stay strings, entries are opaque. A row without ';' gets a null
    # entry and extra fields are cut off; prep_df drops such rows.
    schema = {"name": pl.Utf8, "entry": pl.Utf8}
    try:
        df = pl.read_csv(
            filename,
            separator=';',
            has_header=False,
            schema=schema,
            truncate_ragged_lines=True
        )
    except pl.exceptions.NoDataError:
        logger.warning(f"Names file {filename} is empty")
        df = pl.DataFrame(schema=schema)

    # Number of components, the leading slash does not count as one
    df = df.with_columns([
        pl.col("name").str.count_matches("/").alias("depth")
    ])

    return df


def prep_df(df: pl.DataFrame) -> pl.DataFrame:
    """
    Prepare a name table for insertion.

    Drops rows without a usable name or without an entry and orders the
    rest by depth, keeping the file order between names of the same depth.
    Inserting parents before children lets each listed name keep its own
    entry: a node created while inserting a longer name would otherwise
    already carry that name's entry.

    Parameters
    ----------
    df : polars.DataFrame
        Raw name table dataframe

    Returns
    -------
    polars.DataFrame
        Filtered dataframe sorted by depth
    """
    valid = (
        pl.col("name").is_not_null()
        & pl.col("name").str.starts_with("/")
        & ~pl.col("name").str.contains("//", literal=True)
        & ~pl.col("name").str.ends_with("/")
        & pl.col("entry").is_not_null()
    )
    result = df.filter(valid)

    dropped = len(df) - len(result)
    if dropped:
        logger.warning(f"Dropped {dropped:,} rows with malformed names or missing entries")

    return result.sort("depth", maintain_order=True)


def build_name_tree(df: pl.DataFrame, root: str = "") -> Node:
    """
    Build a name tree from the name table DataFrame.

    Parameters
    ----------
    df : polars.DataFrame
        The name table dataframe with columns: name, entry
    root : str
        Label of the root node

    Returns
    -------
    Node
        A name tree containing all names
    """
    tree = new(root)
    total = len(df)

    logger.info(f"Building name tree from {total:,} names...")

    for idx, row in enumerate(df.iter_rows(named=True), 1):
        tree.insert(row['name'], row['entry'])

        # Progress indicator every 100k names
        if idx % 100000 == 0:
            logger.info(f"  Processed {idx:,}/{total:,} names ({idx*100//total}%)")

    logger.info(f"Name tree built: {tree.size():,} nodes from {total:,} names")

    return tree
