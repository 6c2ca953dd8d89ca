import pyarrow as pa

from treeframe.columns import col, cols_of
from treeframe.compute import ConvertNode, CSVDataSource, SelectNode

query = ConvertNode(
    cols_of(pa.string()),
    str.upper,
    SelectNode(col("City") + col("Shop Name"), CSVDataSource("data/shops.csv")),
)
for batch in query.batches():
    print("---")
    print(batch)
