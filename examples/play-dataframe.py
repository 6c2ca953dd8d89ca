import datetime

import pyarrow as pa

from treeframe.dataframe import Dataframe, cols

campaigns = Dataframe(pa.table({
  "name": ["Winter Sale", "Spring Sale", "Summer Sale", "Autumn Sale"],
  "period": [
    {"startDate": datetime.date(2023, 1, 1), "endDate": datetime.date(2023, 1, 31)},
    {"startDate": datetime.date(2023, 4, 1), "endDate": datetime.date(2023, 4, 30)},
    {"startDate": datetime.date(2023, 7, 1), "endDate": datetime.date(2023, 7, 31)},
    {"startDate": datetime.date(2023, 10, 1), "endDate": datetime.date(2023, 10, 31)},
  ],
}))
visits = Dataframe(pa.table({
  "date": [
    datetime.date(2023, 1, 10),
    datetime.date(2023, 1, 20),
    datetime.date(2023, 4, 15),
    datetime.date(2023, 5, 1),
    datetime.date(2023, 7, 10),
  ],
  "userId": [1, 2, 1, 3, 2],
}))

df = campaigns.left_predicate_join(
  visits,
  lambda row: row["period", "startDate"] <= row.right["date"] <= row["period", "endDate"],
)
for row in df.rows():
  print(row["name"], row["date"], row["userId"])

print(df.select(cols(lambda c: not c.is_group).recursively()).to_arrow())
