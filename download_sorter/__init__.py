"""Sort spreadsheet rows by abbreviated download counts ("2M", "900K", "< 5k").

Formula cells (hyperlinks included) keep their formulas through the reorder,
and the pre-sort grid is kept as a single snapshot so the sort can be undone.
"""

__version__ = "0.1.0"
