"""Reading and writing indented, tokenized data files."""

from conditionset.datafile.reader import DataFile, DataNode, Diagnostic
from conditionset.datafile.writer import DataWriter, quote_token

__all__ = [
    "DataFile",
    "DataNode",
    "DataWriter",
    "Diagnostic",
    "quote_token",
]
